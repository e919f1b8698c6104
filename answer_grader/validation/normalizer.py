"""
Schema Normalizer - Turns any parsed payload into a valid Evaluation.

This is the schema firewall between the generation service and the rest of
the system. Every field is treated as unknown input: wrong types are
replaced with defaults, numbers are clamped, lists are trimmed to their caps
and half-populated nested entries are dropped. Normalization never raises
on bad payload content, and it is a no-op on its own output.
"""
import math
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging

from ..models.evaluation import (
    Evaluation,
    Pitfall,
    Improvement,
    FollowUpQuestion,
    ScoreScale,
    SUB_SCORE_AXES
)
from ..scoring.aggregator import ScoreAggregator, round_half_up, clamp
from .category import resolve_category, classify_question

logger = logging.getLogger(__name__)

NEUTRAL_SUB_SCORE = 7
MIN_POLISHED_CHARS = 20
INT_LIMIT = 10 ** 6

# Field caps
LIST_LIMITS: Dict[str, int] = {
    "strengths": 4,
    "gaps": 4,
    "adds": 4,
    "next": 4,
    "keywords": 6,
    "risk_points": 3,
    "logic_flaws": 3,
    "missing_details": 3,
    "pitfalls": 4,
    "improvements": 3,
    "follow_up_questions": 3,
}

# Keys accepted for each field: our own camelCase first, then upstream variants
FIELD_KEYS: Dict[str, Tuple[str, ...]] = {
    "sub_scores": ("subScores", "scores", "sub_scores"),
    "strengths": ("strengths",),
    "gaps": ("gaps",),
    "adds": ("adds",),
    "next": ("next", "next_steps", "nextSteps"),
    "keywords": ("keywords",),
    "risk_points": ("riskPoints", "risk_points"),
    "logic_flaws": ("logicFlaws", "logic_flaws"),
    "missing_details": ("missingDetails", "missing_details"),
    "pitfalls": ("pitfalls",),
    "improvements": ("improvements",),
    "follow_up_questions": ("followUpQuestions", "follow_up_questions", "follow_up"),
    "polished_answer": ("polishedAnswer", "polished", "polished_answer"),
    "summary_interviewer": ("summaryInterviewer", "summary_interviewer"),
    "summary_coach": ("summaryCoach", "summary_coach"),
    "category": ("category",),
}


def _lookup(payload: Mapping[str, Any], field: str) -> Any:
    for key in FIELD_KEYS[field]:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def _clean_text(value: Any) -> str:
    """Trimmed string, or '' for anything that is not a string."""
    if isinstance(value, str):
        return value.strip()
    return ""


def _clean_line(value: Any) -> str:
    """Like _clean_text, with inner whitespace and newlines collapsed to single spaces."""
    return " ".join(_clean_text(value).split())


def to_number(value: Any) -> Optional[float]:
    """Parse a finite number from a number or numeric string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        # JSON integers can exceed float range; anything this large clamps the same way
        number = float(clamp(value, -INT_LIMIT, INT_LIMIT))
    elif isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def normalize_sub_score(value: Any, score_scale: ScoreScale = ScoreScale.TEN,
                        neutral: int = NEUTRAL_SUB_SCORE) -> int:
    """One sub-score as an integer in 0-10; unusable input gets the neutral score."""
    number = to_number(value)
    if number is None:
        return neutral
    if score_scale is ScoreScale.HUNDRED:
        number = number / 10
    return clamp(round_half_up(number), 0, 10)


def normalize_sub_scores(value: Any, score_scale: ScoreScale = ScoreScale.TEN,
                         neutral: int = NEUTRAL_SUB_SCORE) -> Dict[str, int]:
    if not isinstance(value, Mapping):
        value = {}
    return {axis: normalize_sub_score(value.get(axis), score_scale, neutral) for axis in SUB_SCORE_AXES}


def normalize_string_list(value: Any, limit: int) -> Tuple[str, ...]:
    """
    Trimmed, non-empty strings in original order, capped at limit.

    Objects carrying a string 'text' field are accepted for their text.
    """
    if not isinstance(value, (list, tuple)):
        return ()

    items: List[str] = []
    for entry in value:
        if isinstance(entry, Mapping):
            entry = entry.get("text")
        text = _clean_line(entry)
        if text:
            items.append(text)
        if len(items) >= limit:
            break
    return tuple(items)


def normalize_level(value: Any) -> Optional[int]:
    number = to_number(value)
    if number is None:
        return None
    return clamp(round_half_up(number), 1, 3)


def normalize_pitfalls(value: Any, limit: int = LIST_LIMITS["pitfalls"]) -> Tuple[Pitfall, ...]:
    """Accept bare strings or {text, level} objects; always emit Pitfall records."""
    if not isinstance(value, (list, tuple)):
        return ()

    pitfalls: List[Pitfall] = []
    for entry in value:
        if isinstance(entry, str):
            text, level = _clean_line(entry), None
        elif isinstance(entry, Mapping):
            text = _clean_line(entry.get("text"))
            level = normalize_level(entry.get("level", entry.get("severity")))
        else:
            continue
        if text:
            pitfalls.append(Pitfall(text=text, level=level))
        if len(pitfalls) >= limit:
            break
    return tuple(pitfalls)


def normalize_improvements(value: Any, limit: int = LIST_LIMITS["improvements"]) -> Tuple[Improvement, ...]:
    """Keep only entries with both 'before' and 'after'; never fill them in."""
    if not isinstance(value, (list, tuple)):
        return ()

    improvements: List[Improvement] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            continue
        before = _clean_line(entry.get("before"))
        after = _clean_line(entry.get("after"))
        if not before or not after:
            continue
        improvements.append(Improvement(before=before, after=after, reason=_clean_line(entry.get("reason"))))
        if len(improvements) >= limit:
            break
    return tuple(improvements)


def normalize_follow_ups(value: Any, limit: int = LIST_LIMITS["follow_up_questions"]) -> Tuple[FollowUpQuestion, ...]:
    """Accept bare question strings or {question, reason} objects."""
    if not isinstance(value, (list, tuple)):
        return ()

    follow_ups: List[FollowUpQuestion] = []
    for entry in value:
        if isinstance(entry, str):
            question, reason = _clean_line(entry), ""
        elif isinstance(entry, Mapping):
            question = _clean_line(entry.get("question"))
            reason = _clean_line(entry.get("reason"))
        else:
            continue
        if question:
            follow_ups.append(FollowUpQuestion(question=question, reason=reason))
        if len(follow_ups) >= limit:
            break
    return tuple(follow_ups)


def normalize_polished(value: Any, min_chars: int = MIN_POLISHED_CHARS) -> str:
    text = _clean_text(value)
    return text if len(text) >= min_chars else ""


class SchemaNormalizer:
    """
    Field-by-field coercion of an untrusted payload into an Evaluation.

    Args:
        aggregator: Derives overall score, grade and chart from sub-scores
        score_scale: Scale the upstream sub-scores were requested on
        min_polished_chars: Shorter polished answers are discarded
        list_limits: Per-field caps overriding LIST_LIMITS
        neutral_sub_score: Used for missing or non-numeric sub-scores
    """

    def __init__(
        self,
        aggregator: Optional[ScoreAggregator] = None,
        score_scale: ScoreScale = ScoreScale.TEN,
        min_polished_chars: int = MIN_POLISHED_CHARS,
        list_limits: Optional[Dict[str, int]] = None,
        neutral_sub_score: int = NEUTRAL_SUB_SCORE
    ):
        self.aggregator = aggregator or ScoreAggregator()
        self.score_scale = score_scale
        self.min_polished_chars = min_polished_chars
        self.neutral_sub_score = neutral_sub_score
        self.list_limits = dict(LIST_LIMITS)
        if list_limits:
            self.list_limits.update(list_limits)

    def normalize(self, value: Any, question: str = "") -> Evaluation:
        """
        Normalize any parsed value into a fully populated Evaluation.

        Args:
            value: Parsed payload of any shape (None, scalar, list, dict)
            question: Question text, used to classify the category when needed

        Returns:
            A structurally valid Evaluation
        """
        if not isinstance(value, Mapping):
            if value is not None:
                logger.warning(f"Expected a JSON object, got {type(value).__name__}; using defaults")
            value = {}

        # Our own serialized output is already on the 0-10 scale
        scale = ScoreScale.TEN if "subScores" in value else self.score_scale
        sub_scores = normalize_sub_scores(_lookup(value, "sub_scores"), scale, self.neutral_sub_score)
        recorded = to_number(value.get("overallScore")) if "subScores" in value else None
        breakdown = self.aggregator.aggregate(sub_scores, recorded_overall=recorded)

        limits = self.list_limits
        return Evaluation(
            overall_score=breakdown.overall_score,
            sub_scores=sub_scores,
            grade=breakdown.grade,
            category=resolve_category(_lookup(value, "category"), question),
            chart=breakdown.chart,
            strengths=normalize_string_list(_lookup(value, "strengths"), limits["strengths"]),
            gaps=normalize_string_list(_lookup(value, "gaps"), limits["gaps"]),
            adds=normalize_string_list(_lookup(value, "adds"), limits["adds"]),
            next=normalize_string_list(_lookup(value, "next"), limits["next"]),
            keywords=normalize_string_list(_lookup(value, "keywords"), limits["keywords"]),
            risk_points=normalize_string_list(_lookup(value, "risk_points"), limits["risk_points"]),
            logic_flaws=normalize_string_list(_lookup(value, "logic_flaws"), limits["logic_flaws"]),
            missing_details=normalize_string_list(_lookup(value, "missing_details"), limits["missing_details"]),
            pitfalls=normalize_pitfalls(_lookup(value, "pitfalls"), limits["pitfalls"]),
            improvements=normalize_improvements(_lookup(value, "improvements"), limits["improvements"]),
            follow_up_questions=normalize_follow_ups(
                _lookup(value, "follow_up_questions"), limits["follow_up_questions"]
            ),
            polished_answer=normalize_polished(_lookup(value, "polished_answer"), self.min_polished_chars),
            summary_interviewer=_clean_text(_lookup(value, "summary_interviewer")),
            summary_coach=_clean_text(_lookup(value, "summary_coach")),
        )


def default_evaluation(question: str = "") -> Evaluation:
    """
    Fallback Evaluation for when grading could not complete.

    Scores are zero, every list is empty and the category still comes from
    the question text.
    """
    return Evaluation(
        overall_score=0,
        sub_scores={axis: 0 for axis in SUB_SCORE_AXES},
        grade="F",
        category=classify_question(question),
        chart={axis: 0 for axis in SUB_SCORE_AXES},
    )
