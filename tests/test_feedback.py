"""
Tests for feedback text composition.

Run with: pytest tests/test_feedback.py -v
"""
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))


def make_evaluation(**fields):
    from answer_grader.validation import SchemaNormalizer
    return SchemaNormalizer().normalize(fields)


class TestComposeFeedbackText:
    """Tests for compose_feedback_text."""

    def test_score_line_only_when_everything_empty(self):
        from answer_grader.feedback import compose_feedback_text

        text = compose_feedback_text(make_evaluation())

        assert text == "Overall score: 70/100 (grade B)."

    def test_full_section_order(self):
        from answer_grader.feedback import compose_feedback_text

        evaluation = make_evaluation(
            summary_interviewer="Interviewer view.",
            summary_coach="Coach view.",
            keywords=["caching", "latency"],
            strengths=["Clear"],
            gaps=["No numbers"],
            pitfalls=["Rambling", {"text": "Blame", "level": 3}],
            next=["Practice"],
            follow_up_questions=[{"question": "Why Redis?", "reason": "depth"}],
        )
        text = compose_feedback_text(evaluation)

        assert text == "\n\n".join([
            "Overall score: 70/100 (grade B).",
            "Interviewer view.",
            "Keywords: caching, latency",
            "Strengths:\n- Clear",
            "Gaps:\n- No numbers",
            "Pitfalls:\n- Rambling\n- (level 3) Blame",
            "Next steps:\n- Practice",
            "Follow-up questions:\n- Why Redis?",
        ])

    def test_coach_summary_is_fallback(self):
        from answer_grader.feedback import compose_feedback_text

        text = compose_feedback_text(make_evaluation(summary_coach="Coach view."))

        assert text.split("\n\n")[1] == "Coach view."

    def test_empty_sections_omitted(self):
        from answer_grader.feedback import compose_feedback_text

        text = compose_feedback_text(make_evaluation(gaps=["Only gap"]))

        assert "Strengths:" not in text
        assert "Pitfalls:" not in text
        assert "Keywords:" not in text
        assert text.endswith("Gaps:\n- Only gap")

    def test_deterministic(self, full_payload):
        from answer_grader.feedback import compose_feedback_text
        from answer_grader.validation import SchemaNormalizer

        evaluation = SchemaNormalizer().normalize(full_payload)

        assert compose_feedback_text(evaluation) == compose_feedback_text(evaluation)

    def test_fallback_evaluation(self):
        from answer_grader.feedback import compose_feedback_text
        from answer_grader.validation import default_evaluation

        assert compose_feedback_text(default_evaluation()) == "Overall score: 0/100 (grade F)."


class TestFormatPitfall:

    def test_with_and_without_level(self):
        from answer_grader.feedback import format_pitfall
        from answer_grader.models import Pitfall

        assert format_pitfall(Pitfall("Vague", 2)) == "(level 2) Vague"
        assert format_pitfall(Pitfall("Vague")) == "Vague"
