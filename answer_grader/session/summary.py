"""
Session Summary - Aggregate view over the answers of one practice session.

Unanswered or ungraded questions are passed as None; they count toward the
total but not toward any average.
"""
from typing import Dict, List, Optional, Sequence, Any
from dataclasses import dataclass, field

from ..models.evaluation import Evaluation
from ..scoring.aggregator import grade_for_score, round_half_up


@dataclass(frozen=True)
class CategorySummary:
    """Answer count and average score for one question category."""
    category: str
    count: int
    avg_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "count": self.count, "avgScore": self.avg_score}


@dataclass(frozen=True)
class SessionSummary:
    """Totals for a finished session."""
    total: int
    answered: int
    score_sum: int
    avg_score: Optional[int]
    level: Optional[str]
    by_category: List[CategorySummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "answered": self.answered,
            "scoreSum": self.score_sum,
            "avgScore": self.avg_score,
            "level": self.level,
            "byCategory": [c.to_dict() for c in self.by_category],
        }


def summarize_session(items: Sequence[Optional[Evaluation]]) -> SessionSummary:
    """
    Summarize a session from its per-question evaluations.

    Args:
        items: One entry per question, None where nothing was graded

    Returns:
        SessionSummary; avg_score and level are None when nothing was answered
    """
    answered = [item for item in items if item is not None]
    score_sum = sum(item.overall_score for item in answered)
    avg_score = round_half_up(score_sum / len(answered)) if answered else None

    # Insertion order of the dict keeps categories in first-appearance order
    grouped: Dict[str, List[int]] = {}
    for item in answered:
        grouped.setdefault(item.category, []).append(item.overall_score)

    by_category = [
        CategorySummary(category=category, count=len(scores),
                        avg_score=round_half_up(sum(scores) / len(scores)))
        for category, scores in grouped.items()
    ]

    return SessionSummary(
        total=len(items),
        answered=len(answered),
        score_sum=score_sum,
        avg_score=avg_score,
        level=grade_for_score(avg_score),
        by_category=by_category
    )
