"""
Score Aggregator - Overall score and letter grade from the five sub-scores.

The overall score is always derived here; an overall score supplied by the
generation service is never trusted, so a stored record cannot pair high
sub-scores with a low total.
"""
import math
from typing import Dict, Mapping, Optional
from dataclasses import dataclass
import logging

from ..models.evaluation import SUB_SCORE_AXES

logger = logging.getLogger(__name__)

# (minimum overall score, grade), checked top-down
GRADE_THRESHOLDS = (
    (90, "S"),
    (80, "A"),
    (70, "B"),
    (60, "C"),
    (50, "D"),
)
FAILING_GRADE = "F"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def grade_for_score(score: Optional[float]) -> Optional[str]:
    """Map a 0-100 score to S/A/B/C/D/F; None stays None."""
    if score is None:
        return None
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return FAILING_GRADE


def lenient_sub_score(score: int) -> int:
    """
    Leniency transform for one 0-10 sub-score.

    Raw grading skews harsh for early-career candidates: scores of 3 or
    less gain 2 points, 4-5 gain 1, and 6 or more are left alone.
    """
    if score <= 3:
        return clamp(score + 2, 0, 10)
    if score <= 5:
        return score + 1
    return score


@dataclass(frozen=True)
class ScoreBreakdown:
    """Derived score fields for one Evaluation."""
    overall_score: int
    grade: str
    chart: Dict[str, int]
    adjusted_sub_scores: Dict[str, int]


class ScoreAggregator:
    """
    Derives overall score, grade and chart from normalized sub-scores.

    Args:
        apply_leniency: Apply the leniency transform before averaging.

    The chart is built from the untransformed sub-scores (x10), so it always
    matches the subScores stored alongside it.
    """

    def __init__(self, apply_leniency: bool = True):
        self.apply_leniency = apply_leniency

    def adjust(self, sub_scores: Mapping[str, int], lenient: Optional[bool] = None) -> Dict[str, int]:
        lenient = self.apply_leniency if lenient is None else lenient
        if not lenient:
            return {axis: sub_scores[axis] for axis in SUB_SCORE_AXES}
        return {axis: lenient_sub_score(sub_scores[axis]) for axis in SUB_SCORE_AXES}

    def overall_score(self, sub_scores: Mapping[str, int], lenient: Optional[bool] = None) -> int:
        adjusted = self.adjust(sub_scores, lenient)
        average = sum(adjusted.values()) / len(SUB_SCORE_AXES)
        return clamp(round_half_up(average * 10), 0, 100)

    def aggregate(self, sub_scores: Mapping[str, int],
                  recorded_overall: Optional[float] = None) -> ScoreBreakdown:
        """
        Compute the derived score fields.

        Args:
            sub_scores: Every axis of SUB_SCORE_AXES, already clamped to 0-10
            recorded_overall: Overall score of a previously stored Evaluation.
                Kept only when it is what these sub-scores derive to with or
                without leniency, so a record graded under either setting
                reads back unchanged.

        Returns:
            ScoreBreakdown with overall score, grade, chart and adjusted scores
        """
        adjusted = self.adjust(sub_scores)
        overall = self.overall_score(sub_scores)
        if recorded_overall is not None and recorded_overall != overall:
            derivable = (self.overall_score(sub_scores, True), self.overall_score(sub_scores, False))
            if recorded_overall in derivable:
                overall = derivable[derivable.index(recorded_overall)]
        chart = {axis: clamp(sub_scores[axis] * 10, 0, 100) for axis in SUB_SCORE_AXES}

        logger.debug(f"Aggregated sub-scores {dict(sub_scores)} -> {adjusted} -> {overall}")

        return ScoreBreakdown(
            overall_score=overall,
            grade=grade_for_score(overall),
            chart=chart,
            adjusted_sub_scores=adjusted
        )
