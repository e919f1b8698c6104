"""
Scoring Module - Overall score, leniency transform and letter grades.
"""
from .aggregator import (
    ScoreAggregator,
    ScoreBreakdown,
    grade_for_score,
    lenient_sub_score,
    round_half_up,
    GRADE_THRESHOLDS
)

__all__ = [
    "ScoreAggregator",
    "ScoreBreakdown",
    "grade_for_score",
    "lenient_sub_score",
    "round_half_up",
    "GRADE_THRESHOLDS"
]
