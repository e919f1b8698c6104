"""
Feedback Module - Human-readable rendering of an Evaluation.
"""
from .composer import compose_feedback_text, format_pitfall, score_statement, SECTION_TITLES

__all__ = [
    "compose_feedback_text",
    "format_pitfall",
    "score_statement",
    "SECTION_TITLES"
]
