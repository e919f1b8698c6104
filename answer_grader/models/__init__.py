"""
Models Module - Grading request and canonical Evaluation record.
"""
from .evaluation import (
    Evaluation,
    GenerationRequest,
    Pitfall,
    Improvement,
    FollowUpQuestion,
    ScoreScale,
    SUB_SCORE_AXES,
    CATEGORIES,
    GRADES
)

__all__ = [
    "Evaluation",
    "GenerationRequest",
    "Pitfall",
    "Improvement",
    "FollowUpQuestion",
    "ScoreScale",
    "SUB_SCORE_AXES",
    "CATEGORIES",
    "GRADES"
]
