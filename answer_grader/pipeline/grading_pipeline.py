"""
Grading Pipeline - Orchestrates prompt -> generation -> extraction ->
normalization -> scoring -> feedback for one answer.

Each stage reports a StageResult so a failure can be traced to the stage that
produced it. The pipeline boundary is the only place failures are turned
into the fallback Evaluation; nothing raised inside grade() escapes it.
"""
import time
from typing import Any, Callable, Dict, Optional, Tuple, Union
from dataclasses import dataclass
from enum import Enum
import logging

from ..models.evaluation import Evaluation, GenerationRequest, ScoreScale
from ..prompts.templates import PromptPair, build_grading_prompt
from ..llm.generation_client import GenerationClient, TransportError
from ..parsing.response_extractor import extract_json_payload
from ..validation.normalizer import SchemaNormalizer, default_evaluation
from ..feedback.composer import compose_feedback_text
from ..utils.logger import create_logger, LogLevel

logger = logging.getLogger(__name__)


class FailureKind(Enum):
    NONE = "none"
    TRANSPORT = "transport"
    RATE_LIMITED = "rate_limited"
    MALFORMED_OUTPUT = "malformed_output"
    INTERNAL = "internal"


@dataclass
class StageResult:
    """Result from one pipeline stage."""
    stage: str
    success: bool
    value: Any = None
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class GradingResult:
    """
    Output of one grading call.

    `evaluation` and `feedback_text` form the contract handed to callers;
    `failure`, `detail` and `attempts` are for operators only.
    """
    evaluation: Evaluation
    feedback_text: str
    failure: FailureKind = FailureKind.NONE
    detail: str = ""
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.failure is FailureKind.NONE

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.evaluation.to_dict(), "feedbackText": self.feedback_text}


class FallbackPolicy:
    """Builds the safe default result when grading cannot complete."""

    MESSAGES = {
        FailureKind.RATE_LIMITED: (
            "The grading service is handling too many requests right now, so this answer "
            "could not be graded. Please try again in a moment."
        ),
        FailureKind.TRANSPORT: (
            "The grading service could not be reached, so this answer could not be graded. "
            "Please try again later."
        ),
        FailureKind.MALFORMED_OUTPUT: (
            "The grading service returned a response that could not be read, so this answer "
            "could not be graded. Please try again."
        ),
        FailureKind.INTERNAL: (
            "An unexpected error occurred while grading this answer. Please try again."
        ),
    }

    @staticmethod
    def kind_for_transport(error: TransportError) -> FailureKind:
        if error.reason == TransportError.RATE_LIMITED:
            return FailureKind.RATE_LIMITED
        return FailureKind.TRANSPORT

    def message_for(self, kind: FailureKind) -> str:
        return self.MESSAGES.get(kind, self.MESSAGES[FailureKind.INTERNAL])

    def fallback(self, kind: FailureKind, question: Any = "", detail: str = "",
                 attempts: int = 1) -> GradingResult:
        return GradingResult(
            evaluation=default_evaluation(question if isinstance(question, str) else ""),
            feedback_text=self.message_for(kind),
            failure=kind,
            detail=detail,
            attempts=attempts
        )


class GradingPipeline:
    """
    Grades a single free-text interview answer.

    Args:
        client: Generation backend, constructed once by the caller
        normalizer: Schema normalizer (holds the score aggregator)
        score_scale: Sub-score scale requested from the service
        max_retries: Extra attempts after a timeout or rate limit (0 disables)
        retry_delay: Seconds to wait before retry n, multiplied by n
        log_level: Verbosity of the per-call grading logger
        sleep: Sleep function used between retries

    The pipeline keeps no per-call state, so one instance can serve
    concurrent calls.
    """

    def __init__(
        self,
        client: GenerationClient,
        normalizer: Optional[SchemaNormalizer] = None,
        score_scale: ScoreScale = ScoreScale.TEN,
        max_retries: int = 0,
        retry_delay: float = 2.0,
        fallback_policy: Optional[FallbackPolicy] = None,
        log_level: LogLevel = LogLevel.STANDARD,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.client = client
        self.score_scale = score_scale
        self.normalizer = normalizer or SchemaNormalizer(score_scale=score_scale)
        self.max_retries = max(0, int(max_retries))
        self.retry_delay = retry_delay
        self.fallback_policy = fallback_policy or FallbackPolicy()
        self.log_level = log_level
        self._sleep = sleep

    def grade_answer(self, question: str, answer: str, company: Optional[str] = None,
                     job_title: Optional[str] = None) -> GradingResult:
        """Convenience wrapper around grade()."""
        return self.grade(GenerationRequest(question=question, answer=answer,
                                            company=company, job_title=job_title))

    def grade(self, request: Union[GenerationRequest, Dict[str, Any]]) -> GradingResult:
        """
        Run the full pipeline for one answer. Never raises.

        Args:
            request: GenerationRequest, or the session layer's camelCase dict

        Returns:
            GradingResult; on any failure, the fallback Evaluation and message
        """
        question = ""
        try:
            if not isinstance(request, GenerationRequest):
                request = GenerationRequest.from_dict(request)
            question = request.question
            return self._run(request)
        except Exception as e:
            logger.exception("Grading pipeline failed unexpectedly")
            return self.fallback_policy.fallback(FailureKind.INTERNAL, question, detail=str(e))

    def _run(self, request: GenerationRequest) -> GradingResult:
        glog = create_logger("GRADING", self.log_level)
        start_time = time.time()

        # Stage 1: prompt
        prompt = self._build_prompt(request).value

        # Stage 2: generation (the only blocking call)
        glog.phase(f"Requesting evaluation from {getattr(self.client, 'model', 'unknown')}")
        with glog.timer("generation", warn_threshold_ms=15000):
            generation, attempts = self._generate(prompt, glog)
        glog.metric("attempts", attempts)

        if not generation.success:
            error = generation.error
            kind = self.fallback_policy.kind_for_transport(error)
            glog.error(f"Generation failed after {attempts} attempt(s) ({error.reason})", error)
            return self.fallback_policy.fallback(kind, request.question, detail=str(error), attempts=attempts)

        raw_text = generation.value if isinstance(generation.value, str) else ""
        glog.metric("raw_output_chars", len(raw_text))

        # Stage 3: extraction
        extraction = extract_json_payload(raw_text)
        if not extraction.success:
            glog.raw_output(raw_text, extraction.error.reason)
            return self.fallback_policy.fallback(
                FailureKind.MALFORMED_OUTPUT, request.question,
                detail=str(extraction.error), attempts=attempts
            )

        # Stages 4-5: normalization and scoring
        evaluation = self.normalizer.normalize(extraction.value, request.question)
        glog.grade_decision(
            evaluation.overall_score,
            evaluation.grade,
            evaluation.category,
            self.normalizer.aggregator.adjust(evaluation.sub_scores)
        )

        # Stage 6: feedback text
        feedback_text = compose_feedback_text(evaluation)

        glog.metric("duration_sec", f"{time.time() - start_time:.1f}")
        glog.success(f"Graded answer: {evaluation.overall_score}/100 ({evaluation.grade})")
        glog.debug(glog.get_summary())

        return GradingResult(
            evaluation=evaluation,
            feedback_text=feedback_text,
            attempts=attempts
        )

    def _build_prompt(self, request: GenerationRequest) -> StageResult:
        return StageResult("prompt", True, build_grading_prompt(request, self.score_scale))

    def _generate(self, prompt: PromptPair, glog) -> Tuple[StageResult, int]:
        """Call the client, retrying timeouts and rate limits up to max_retries times."""
        attempt = 0
        while True:
            attempt += 1
            try:
                return StageResult("generation", True, self.client.generate(prompt)), attempt
            except TransportError as e:
                error = e
            except Exception as e:
                error = TransportError(TransportError.UNKNOWN, f"{type(e).__name__}: {e}")
                error.__cause__ = e

            if error.is_retryable and attempt <= self.max_retries:
                delay = self.retry_delay * attempt
                glog.warning(
                    f"Generation {error.reason} (attempt {attempt}/{self.max_retries + 1}), "
                    f"retrying in {delay:.1f}s",
                    LogLevel.STANDARD
                )
                self._sleep(delay)
                continue

            return StageResult("generation", False, error=error), attempt
