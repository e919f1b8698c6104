"""
Prompt Templates - Instructions for grading a single interview answer.

Design Principles:
1. SCHEMA FIRST: Embed an example of the exact JSON shape we parse
2. JSON ONLY: Forbid commentary and code fences around the payload
3. GROUNDING: Judge what the candidate actually said, not what they might mean
4. BREVITY: Short list items keep the payload inside the output limit
"""
import json
from dataclasses import dataclass

from ..models.evaluation import GenerationRequest, ScoreScale, SUB_SCORE_AXES


UNSPECIFIED = "unspecified"


def _prompt_text(value) -> str:
    """Strings are kept verbatim; other values are stringified, None becomes ''."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _context_field(value) -> str:
    return _prompt_text(value).strip() or UNSPECIFIED


@dataclass(frozen=True)
class PromptPair:
    """System and user instructions for one grading call."""
    system_prompt: str
    user_prompt: str
    score_scale: ScoreScale = ScoreScale.TEN


class GradingPromptTemplates:
    """
    Prompt templates for interview answer grading.

    The system prompt fixes the rubric and output rules; the user prompt
    carries the interview context, the candidate's answer verbatim and an
    example payload that biases the service toward our schema.
    """

    # ==========================================================================
    # SYSTEM PROMPT
    # ==========================================================================

    SYSTEM_PROMPT_GRADER = """You are a senior technical interview coach reviewing a candidate's answer.

GOAL:
- Give feedback the candidate can act on before their next real interview.
- Judge real engineering experience: concrete actions and results matter more than polished wording.
- Return ONE JSON object and nothing else. Never wrap it in a code block.

RUBRIC (every sub-score is an integer from 0 to {scale_max}):
- structure: flow of the answer and completeness from a STAR (Situation-Task-Action-Result) view
- specificity: examples, numbers, metrics and tool names
- logic: how well problem -> approach -> execution -> result connect
- tech_depth: technical depth, reasons behind architecture and tool choices, grasp of performance and quality
- risk: awareness of risk and mitigation, quality, stability and security

JSON FIELDS:
- score_overall: number (0-100), your overall impression
- scores: object {{ structure, specificity, logic, tech_depth, risk }} (integers 0-{scale_max})
- strengths: string[] - up to 4. What an interviewer would note as strong.
- gaps: string[] - up to 4. What was weak or missing.
- adds: string[] - up to 4. What the candidate should add to the answer.
- pitfalls: {{ text: string, level: 1|2|3 }}[] - up to 4. Risks to avoid in the interview; level 3 is most serious.
- next: string[] - up to 4. Action items before the next interview.
- logic_flaws: string[] - up to 3. Leaps in reasoning or awkward transitions.
- missing_details: string[] - up to 3. Details that really should have been there.
- risk_points: string[] - up to 3. Weak spots around risk and stability.
- improvements: {{ before: string, after: string, reason: string }}[] - up to 3.
- polished: string - a model answer the candidate could read aloud; at most two short paragraphs.
- follow_up_questions: {{ question: string, reason: string }}[] - up to 3.
- keywords: string[] - up to 6. Company, technology and behavior keywords.
- summary_interviewer: string - one paragraph written as the interviewer's evaluation.
- summary_coach: string - one paragraph of advice from the coach to the candidate.
- category: string - one of "behavior", "tech", "architecture", "incident", "data", "general".

LENGTH LIMITS (VERY IMPORTANT):
- Keep the whole JSON under 5000 characters and never above 8000.
- Each list item is a single short sentence.

FORMAT RULES:
- The output must be one valid JSON object.
- No explanation, comments, markdown or ```json fences before or after the JSON.
- Include every field even when empty (use [] for empty lists and "" for empty strings)."""

    # ==========================================================================
    # USER PROMPT
    # ==========================================================================

    GRADING_PROMPT = """Company: {company}
Role / position: {job_title}

Interview question:
{question}

Candidate answer:
{answer}

Using the JSON schema described above, produce the evaluation for this answer.
Return JSON ONLY, in a structure like the example below (no explanation, no code block).

Example (for structure only - compute fresh values):
{example}"""

    # ==========================================================================
    # EXAMPLE PAYLOAD
    # ==========================================================================

    EXAMPLE_OUTPUT = {
        "score_overall": 82,
        "scores": {axis: 8 for axis in SUB_SCORE_AXES},
        "strengths": ["Gives concrete numbers and cases", "Clear about their own role in the team"],
        "gaps": ["Little explanation of why the technology was chosen"],
        "adds": ["State the performance gain as a number"],
        "pitfalls": [{"text": "Avoid piling up jargon without explaining it", "level": 2}],
        "next": ["Prepare one or two more stories like this one"],
        "logic_flaws": [],
        "missing_details": ["Before/after comparison figures"],
        "risk_points": ["No mention of a testing strategy"],
        "improvements": [
            {
                "before": "I briefly described the problem.",
                "after": "CPU usage sat above 90% and responses were taking over a second.",
                "reason": "Makes the situation and its severity concrete.",
            }
        ],
        "polished": "A polished model answer goes here, natural enough to read aloud in a real interview.",
        "follow_up_questions": [
            {
                "question": "What was the hardest decision you made during this work?",
                "reason": "To understand the candidate's decision criteria and priorities.",
            }
        ],
        "keywords": ["refactoring", "quality", "collaboration", "test automation"],
        "summary_interviewer": "The candidate clearly explained how refactoring and test automation improved quality.",
        "summary_coach": "Structure and logic are good; backing the results with numbers will make it much stronger.",
        "category": "tech",
    }

    @classmethod
    def get_system_prompt(cls, score_scale: ScoreScale = ScoreScale.TEN) -> str:
        """Get the grader system prompt for the requested sub-score scale."""
        return cls.SYSTEM_PROMPT_GRADER.format(scale_max=score_scale.value)

    @classmethod
    def example_output(cls, score_scale: ScoreScale = ScoreScale.TEN) -> dict:
        """Example payload with sub-scores expressed on the requested scale."""
        example = dict(cls.EXAMPLE_OUTPUT)
        factor = score_scale.value // ScoreScale.TEN.value
        example["scores"] = {axis: score * factor for axis, score in cls.EXAMPLE_OUTPUT["scores"].items()}
        return example

    @classmethod
    def format_grading_prompt(
        cls,
        question: str,
        answer: str,
        company: str = None,
        job_title: str = None,
        score_scale: ScoreScale = ScoreScale.TEN
    ) -> str:
        """Format the user prompt. The answer is embedded verbatim."""
        return cls.GRADING_PROMPT.format(
            company=_context_field(company),
            job_title=_context_field(job_title),
            question=_prompt_text(question) or "(no question)",
            answer=_prompt_text(answer) or "(no answer)",
            example=json.dumps(cls.example_output(score_scale), indent=2, ensure_ascii=False)
        )


def build_grading_prompt(
    request: GenerationRequest,
    score_scale: ScoreScale = ScoreScale.TEN
) -> PromptPair:
    """
    Build the system and user instructions for one grading call.

    Args:
        request: Question, answer and optional company / job title
        score_scale: Scale the service should use for sub-scores

    Returns:
        PromptPair ready for a GenerationClient
    """
    return PromptPair(
        system_prompt=GradingPromptTemplates.get_system_prompt(score_scale),
        user_prompt=GradingPromptTemplates.format_grading_prompt(
            question=request.question,
            answer=request.answer,
            company=request.company,
            job_title=request.job_title,
            score_scale=score_scale
        ),
        score_scale=score_scale
    )
