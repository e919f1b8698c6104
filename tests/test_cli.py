"""
Tests for the command-line entry point.

Run with: pytest tests/test_cli.py -v
"""
import json
import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))


class TestAnswerInput:
    """Tests for answer loading and the caller-side length ceiling."""

    def test_validate_answer(self):
        from main import validate_answer

        assert validate_answer("A real answer", 8000) is None
        assert validate_answer("   ", 8000) == "Answer is empty."
        assert "too long" in validate_answer("x" * 8001, 8000)

    def test_read_answer_from_file(self, tmp_path):
        from main import read_answer

        path = tmp_path / "answer.txt"
        path.write_text("파일에서 읽은 답변", encoding="utf-8")

        assert read_answer(None, str(path)) == "파일에서 읽은 답변"
        assert read_answer("inline", None) == "inline"


class TestRunGrading:
    """Tests for run_grading with a scripted backend."""

    def test_writes_json_output(self, monkeypatch, tmp_path, scripted_client, full_payload_text):
        import main
        from answer_grader import pipeline as pipeline_module

        client = scripted_client(full_payload_text)
        real_factory = pipeline_module.create_grading_pipeline
        monkeypatch.setattr(
            pipeline_module, "create_grading_pipeline",
            lambda provider=None, model=None, verbose=False: real_factory(client=client)
        )

        output = tmp_path / "feedback.json"
        result = main.run_grading("Tell me about an outage", "We rolled back.", output_path=str(output))

        written = json.loads(output.read_text(encoding="utf-8"))
        assert written == result.to_dict()
        assert written["data"]["overallScore"] == 64

    def test_rejects_overlong_answer(self, monkeypatch):
        import main

        monkeypatch.setattr(sys, "argv", ["main.py", "grade", "-q", "Q", "-a", "x" * 8001])

        with pytest.raises(SystemExit):
            main.main()
