"""
Tests for the Evaluation record, its wire format and storage mapping.

Run with: pytest tests/test_models.py -v
"""
import json
import dataclasses
import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

CONTRACT_KEYS = {
    "overallScore", "subScores", "grade", "category", "strengths", "gaps", "adds",
    "next", "keywords", "riskPoints", "logicFlaws", "missingDetails", "pitfalls",
    "improvements", "followUpQuestions", "polishedAnswer", "summaryInterviewer",
    "summaryCoach", "chart",
}


class TestEvaluation:
    """Tests for the Evaluation class."""

    @pytest.fixture
    def evaluation(self, full_payload):
        from answer_grader.validation import SchemaNormalizer
        return SchemaNormalizer().normalize(full_payload, "Tell me about an outage")

    def test_to_dict_keys(self, evaluation):
        output = evaluation.to_dict()

        assert set(output) == CONTRACT_KEYS
        assert list(output["subScores"]) == ["structure", "specificity", "logic", "tech_depth", "risk"]
        assert output["pitfalls"] == [{"text": "Blaming another team", "level": 2}]
        assert output["improvements"][0] == {
            "before": "We fixed it.", "after": "I rolled back within 10 minutes.", "reason": "Concrete"
        }
        assert output["followUpQuestions"] == [
            {"question": "How did you detect it?", "reason": "Checks monitoring"}
        ]

    def test_to_dict_is_json_serializable(self, evaluation):
        assert json.loads(json.dumps(evaluation.to_dict())) == evaluation.to_dict()

    def test_frozen(self, evaluation):
        with pytest.raises(dataclasses.FrozenInstanceError):
            evaluation.grade = "S"

    def test_score_mappings_are_read_only(self, evaluation):
        with pytest.raises(TypeError):
            evaluation.sub_scores["logic"] = 99
        with pytest.raises(TypeError):
            evaluation.chart["logic"] = 990

        assert evaluation.sub_scores["logic"] == 7
        assert evaluation.to_dict()["chart"]["logic"] == 70

    def test_storage_columns(self, evaluation):
        columns = evaluation.to_storage_columns("feedback text")

        assert set(columns) == {
            "score", "feedback", "summary_interviewer", "summary_coach", "strengths", "gaps",
            "adds", "pitfalls", "next_steps", "polished", "keywords", "chart", "follow_up", "category",
        }
        assert columns["score"] == 64
        assert columns["feedback"] == "feedback text"
        assert columns["category"] == "incident"
        assert json.loads(columns["next_steps"]) == ["Rehearse the result section"]
        assert json.loads(columns["chart"])["structure"] == 80
        assert json.loads(columns["follow_up"])[0]["question"] == "How did you detect it?"

    def test_storage_columns_keep_non_ascii(self):
        from answer_grader.validation import SchemaNormalizer

        evaluation = SchemaNormalizer().normalize({"strengths": ["구체적인 수치 제시"]})

        assert "구체적인 수치 제시" in evaluation.to_storage_columns()["strengths"]

    def test_from_dict_round_trip(self, evaluation):
        from answer_grader.models import Evaluation

        assert Evaluation.from_dict(evaluation.to_dict(), "Tell me about an outage") == evaluation


class TestGenerationRequest:

    def test_from_session_payload(self):
        from answer_grader.models import GenerationRequest

        request = GenerationRequest.from_dict({"question": "Q", "answer": "A", "jobTitle": "SRE"})

        assert request == GenerationRequest(question="Q", answer="A", company=None, job_title="SRE")

    def test_missing_text_becomes_empty(self):
        from answer_grader.models import GenerationRequest

        request = GenerationRequest.from_dict({})

        assert request.question == "" and request.answer == ""

    def test_non_string_fields_are_stringified(self):
        from answer_grader.models import GenerationRequest

        request = GenerationRequest.from_dict({"question": 12, "answer": "A", "company": 42, "jobTitle": 7})

        assert request == GenerationRequest(question="12", answer="A", company="42", job_title="7")
