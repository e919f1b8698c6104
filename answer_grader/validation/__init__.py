"""
Validation Module - Schema normalization of untrusted generation output.
"""
from .normalizer import (
    SchemaNormalizer,
    default_evaluation,
    normalize_sub_score,
    normalize_string_list,
    normalize_pitfalls,
    normalize_improvements,
    normalize_follow_ups,
    LIST_LIMITS,
    NEUTRAL_SUB_SCORE,
    MIN_POLISHED_CHARS
)
from .category import classify_question, resolve_category, DEFAULT_CATEGORY

__all__ = [
    "SchemaNormalizer",
    "default_evaluation",
    "normalize_sub_score",
    "normalize_string_list",
    "normalize_pitfalls",
    "normalize_improvements",
    "normalize_follow_ups",
    "LIST_LIMITS",
    "NEUTRAL_SUB_SCORE",
    "MIN_POLISHED_CHARS",
    "classify_question",
    "resolve_category",
    "DEFAULT_CATEGORY"
]
