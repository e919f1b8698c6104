"""
Interview Answer Grader - Source Package

Grades one free-text interview answer into a schema-valid Evaluation plus a
readable feedback text, falling back to a safe default whenever the
generation service cannot be used.
"""
from .models import (
    Evaluation,
    GenerationRequest,
    Pitfall,
    Improvement,
    FollowUpQuestion,
    ScoreScale,
    SUB_SCORE_AXES,
    CATEGORIES
)
from .prompts import PromptPair, build_grading_prompt
from .llm import (
    GenerationClient,
    ChatCompletionsClient,
    OllamaClient,
    TransportError,
    create_generation_client
)
from .parsing import extract_json_payload, ExtractionResult, MalformedOutputError
from .validation import SchemaNormalizer, default_evaluation
from .scoring import ScoreAggregator, grade_for_score
from .feedback import compose_feedback_text
from .pipeline import (
    GradingPipeline,
    GradingResult,
    FallbackPolicy,
    FailureKind,
    create_grading_pipeline
)
from .session import SessionSummary, CategorySummary, summarize_session

__all__ = [
    # Models
    "Evaluation",
    "GenerationRequest",
    "Pitfall",
    "Improvement",
    "FollowUpQuestion",
    "ScoreScale",
    "SUB_SCORE_AXES",
    "CATEGORIES",

    # Stages
    "PromptPair",
    "build_grading_prompt",
    "GenerationClient",
    "ChatCompletionsClient",
    "OllamaClient",
    "TransportError",
    "create_generation_client",
    "extract_json_payload",
    "ExtractionResult",
    "MalformedOutputError",
    "SchemaNormalizer",
    "default_evaluation",
    "ScoreAggregator",
    "grade_for_score",
    "compose_feedback_text",

    # Pipeline
    "GradingPipeline",
    "GradingResult",
    "FallbackPolicy",
    "FailureKind",
    "create_grading_pipeline",

    # Session
    "SessionSummary",
    "CategorySummary",
    "summarize_session",
]
