"""
Feedback Composer - Renders an Evaluation as a readable text block.

The block is stored next to the structured record and shown to candidates,
so it is deterministic: same Evaluation, same text.
"""
from typing import List, Sequence

from ..models.evaluation import Evaluation, Pitfall

SECTION_TITLES = {
    "strengths": "Strengths",
    "gaps": "Gaps",
    "pitfalls": "Pitfalls",
    "next": "Next steps",
    "follow_up_questions": "Follow-up questions",
}


def _bullet_section(title: str, lines: Sequence[str]) -> str:
    return "\n".join([f"{title}:"] + [f"- {line}" for line in lines])


def format_pitfall(pitfall: Pitfall) -> str:
    if pitfall.level is not None:
        return f"(level {pitfall.level}) {pitfall.text}"
    return pitfall.text


def score_statement(evaluation: Evaluation) -> str:
    return f"Overall score: {evaluation.overall_score}/100 (grade {evaluation.grade})."


def compose_feedback_text(evaluation: Evaluation) -> str:
    """
    Build the multi-section feedback text for an Evaluation.

    Order: score line, interviewer summary (else coach summary), keywords,
    then strengths, gaps, pitfalls, next steps and follow-up questions.
    Empty parts are left out entirely.
    """
    blocks: List[str] = [score_statement(evaluation)]

    summary = evaluation.summary_interviewer or evaluation.summary_coach
    if summary:
        blocks.append(summary)

    if evaluation.keywords:
        blocks.append("Keywords: " + ", ".join(evaluation.keywords))

    sections = [
        ("strengths", list(evaluation.strengths)),
        ("gaps", list(evaluation.gaps)),
        ("pitfalls", [format_pitfall(p) for p in evaluation.pitfalls]),
        ("next", list(evaluation.next)),
        ("follow_up_questions", [f.question for f in evaluation.follow_up_questions]),
    ]
    for key, lines in sections:
        if lines:
            blocks.append(_bullet_section(SECTION_TITLES[key], lines))

    return "\n\n".join(blocks)
