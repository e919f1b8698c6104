"""
Pipeline Module - Orchestration and fallback policy for answer grading.

Flow:
  PROMPT ──▶ GENERATION ──▶ EXTRACTION ──▶ NORMALIZATION ──▶ SCORING ──▶ FEEDBACK
                 │               │                 │
                 └───────────────┴─────────────────┴──▶ FALLBACK (score 0, grade F)
"""
from typing import Optional

from .grading_pipeline import (
    GradingPipeline,
    GradingResult,
    FallbackPolicy,
    FailureKind,
    StageResult
)
from ..llm import GenerationClient, create_generation_client
from ..models.evaluation import ScoreScale
from ..scoring.aggregator import ScoreAggregator
from ..validation.normalizer import SchemaNormalizer
from ..utils.logger import LogLevel


def create_grading_pipeline(
    client: Optional[GenerationClient] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
    score_scale: ScoreScale = ScoreScale.TEN,
    verbose: bool = False
) -> GradingPipeline:
    """
    Factory function to create a grading pipeline from config.py settings.

    Settings are read here, once, and passed into the pipeline explicitly.

    Args:
        client: Pre-built generation client; built from config when omitted
        provider: 'openai' or 'ollama'; config default when omitted
        model: Model name; provider default from config when omitted
        score_scale: Sub-score scale to request from the service
        verbose: Enable verbose logging

    Returns:
        Configured GradingPipeline
    """
    from config import (
        GENERATION_PROVIDER, GENERATION_TIMEOUT, LOG_LEVEL,
        OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_MODEL,
        OLLAMA_BASE_URL, OLLAMA_MODEL,
        LLMConfig, GradingConfig, ModelConfig
    )

    provider = provider or GENERATION_PROVIDER
    if client is None:
        if provider == "ollama":
            model = model or OLLAMA_MODEL
            api_key, base_url = None, OLLAMA_BASE_URL
        else:
            model = model or OPENAI_MODEL
            api_key, base_url = OPENAI_API_KEY, OPENAI_BASE_URL

        model_config = ModelConfig.get_model_config(model)
        client = create_generation_client(
            provider=provider,
            model=model,
            api_key=api_key,
            base_url=base_url,
            timeout=GENERATION_TIMEOUT,
            temperature=model_config.get("temperature", LLMConfig.GRADING_TEMPERATURE),
            max_tokens=model_config.get("max_tokens", LLMConfig.MAX_OUTPUT_TOKENS)
        )
    else:
        model_config = ModelConfig.get_model_config(model or getattr(client, "model", ""))

    # Lenient profiles recenter harsh raw grading before averaging
    aggregator = ScoreAggregator(apply_leniency=model_config.get("strictness_adjustment") == "lenient")
    normalizer = SchemaNormalizer(
        aggregator=aggregator,
        score_scale=score_scale,
        min_polished_chars=GradingConfig.MIN_POLISHED_CHARS,
        list_limits=GradingConfig.LIST_LIMITS,
        neutral_sub_score=GradingConfig.NEUTRAL_SUB_SCORE
    )

    levels = {level.value: level for level in LogLevel}
    log_level = LogLevel.VERBOSE if verbose else levels.get(LOG_LEVEL, LogLevel.STANDARD)
    return GradingPipeline(
        client=client,
        normalizer=normalizer,
        score_scale=score_scale,
        max_retries=LLMConfig.MAX_RETRIES,
        retry_delay=LLMConfig.RETRY_DELAY,
        log_level=log_level
    )


__all__ = [
    "GradingPipeline",
    "GradingResult",
    "FallbackPolicy",
    "FailureKind",
    "StageResult",
    "create_grading_pipeline"
]
