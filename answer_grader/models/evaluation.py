"""
Evaluation Models - The canonical grading record and its nested entries.

An Evaluation is the only shape that leaves the grading pipeline. Every field
is always present with the right type, so persistence and display code never
need to defend against the upstream generation service themselves.
"""
import json
from types import MappingProxyType
from typing import Dict, Any, Mapping, Optional, Tuple
from dataclasses import dataclass
from enum import Enum


# Five fixed rubric axes, in display order
SUB_SCORE_AXES: Tuple[str, ...] = ("structure", "specificity", "logic", "tech_depth", "risk")

# Canonical question categories
CATEGORIES: Tuple[str, ...] = ("behavior", "tech", "architecture", "incident", "data", "general")

GRADES: Tuple[str, ...] = ("S", "A", "B", "C", "D", "F")


class ScoreScale(Enum):
    """Scale the upstream service is asked to use for sub-scores."""
    TEN = 10
    HUNDRED = 100


def _as_text(value: Any) -> Optional[str]:
    """Session payloads are loosely typed: keep strings, stringify other values, None stays None."""
    if value is None or isinstance(value, str):
        return value
    return str(value)


@dataclass(frozen=True)
class GenerationRequest:
    """One answer to grade, with the interview context it was given in."""
    question: str
    answer: str
    company: Optional[str] = None
    job_title: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "GenerationRequest":
        """Build a request from the session layer's camelCase payload."""
        job_title = payload.get("jobTitle", payload.get("job_title"))
        return cls(
            question=_as_text(payload.get("question")) or "",
            answer=_as_text(payload.get("answer")) or "",
            company=_as_text(payload.get("company")),
            job_title=_as_text(job_title),
        )


@dataclass(frozen=True)
class Pitfall:
    """An interview risk, with an optional severity from 1 (minor) to 3 (serious)."""
    text: str
    level: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "level": self.level}


@dataclass(frozen=True)
class Improvement:
    """A concrete rewrite suggestion for part of the answer."""
    before: str
    after: str
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"before": self.before, "after": self.after, "reason": self.reason}


@dataclass(frozen=True)
class FollowUpQuestion:
    """A question an interviewer would likely ask next."""
    question: str
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"question": self.question, "reason": self.reason}


@dataclass(frozen=True)
class Evaluation:
    """
    Canonical, schema-valid grading result.

    Scores:
        overall_score is 0-100 and always derived from sub_scores.
        sub_scores holds every axis in SUB_SCORE_AXES on a 0-10 scale.
        chart mirrors sub_scores on a 0-100 scale.

    List fields are tuples and the score mappings are read-only views, so an
    Evaluation cannot be changed after the pipeline hands it out.
    """
    overall_score: int
    sub_scores: Mapping[str, int]
    grade: str
    category: str
    chart: Mapping[str, int]
    strengths: Tuple[str, ...] = ()
    gaps: Tuple[str, ...] = ()
    adds: Tuple[str, ...] = ()
    next: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    risk_points: Tuple[str, ...] = ()
    logic_flaws: Tuple[str, ...] = ()
    missing_details: Tuple[str, ...] = ()
    pitfalls: Tuple[Pitfall, ...] = ()
    improvements: Tuple[Improvement, ...] = ()
    follow_up_questions: Tuple[FollowUpQuestion, ...] = ()
    polished_answer: str = ""
    summary_interviewer: str = ""
    summary_coach: str = ""

    def __post_init__(self):
        object.__setattr__(self, "sub_scores", MappingProxyType(dict(self.sub_scores)))
        object.__setattr__(self, "chart", MappingProxyType(dict(self.chart)))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire contract used by the HTTP and storage layers."""
        return {
            "overallScore": self.overall_score,
            "subScores": {axis: self.sub_scores[axis] for axis in SUB_SCORE_AXES},
            "grade": self.grade,
            "category": self.category,
            "strengths": list(self.strengths),
            "gaps": list(self.gaps),
            "adds": list(self.adds),
            "next": list(self.next),
            "keywords": list(self.keywords),
            "riskPoints": list(self.risk_points),
            "logicFlaws": list(self.logic_flaws),
            "missingDetails": list(self.missing_details),
            "pitfalls": [p.to_dict() for p in self.pitfalls],
            "improvements": [i.to_dict() for i in self.improvements],
            "followUpQuestions": [f.to_dict() for f in self.follow_up_questions],
            "polishedAnswer": self.polished_answer,
            "summaryInterviewer": self.summary_interviewer,
            "summaryCoach": self.summary_coach,
            "chart": {axis: self.chart[axis] for axis in SUB_SCORE_AXES},
        }

    def to_storage_columns(self, feedback_text: str = "") -> Dict[str, Any]:
        """
        Map onto the session_questions storage columns.

        List and object fields are JSON-encoded so each column can be written
        independently; scalar fields are stored as-is.
        """
        data = self.to_dict()

        def encode(value: Any) -> str:
            return json.dumps(value, ensure_ascii=False)

        return {
            "score": self.overall_score,
            "feedback": feedback_text,
            "summary_interviewer": self.summary_interviewer,
            "summary_coach": self.summary_coach,
            "strengths": encode(data["strengths"]),
            "gaps": encode(data["gaps"]),
            "adds": encode(data["adds"]),
            "pitfalls": encode(data["pitfalls"]),
            "next_steps": encode(data["next"]),
            "polished": self.polished_answer,
            "keywords": encode(data["keywords"]),
            "chart": encode(data["chart"]),
            "follow_up": encode(data["followUpQuestions"]),
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, value: Any, question: str = "") -> "Evaluation":
        """Re-read a serialized Evaluation through the schema normalizer."""
        from ..validation.normalizer import SchemaNormalizer
        return SchemaNormalizer().normalize(value, question)
