"""
Tests for the grading pipeline and its fallback policy.

Run with: pytest tests/test_pipeline.py -v
"""
import json
import threading
import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

QUESTION = "Tell me about a production outage you handled"
ANSWER = "Our checkout API went down during a sale. I led the rollback and wrote the postmortem."


class TestGradingPipeline:
    """Tests for the GradingPipeline class."""

    def test_successful_grading(self, scripted_client, full_payload_text):
        from answer_grader.pipeline import GradingPipeline, FailureKind

        client = scripted_client(full_payload_text)
        result = GradingPipeline(client).grade_answer(QUESTION, ANSWER)

        assert result.ok
        assert result.failure is FailureKind.NONE
        assert result.attempts == 1
        assert result.evaluation.overall_score == 64
        assert result.evaluation.grade == "C"
        assert result.evaluation.category == "incident"
        assert result.feedback_text.startswith("Overall score: 64/100 (grade C).")
        assert client.calls == 1

    def test_prompt_carries_request(self, scripted_client, full_payload_text):
        from answer_grader.pipeline import GradingPipeline

        client = scripted_client(full_payload_text)
        GradingPipeline(client).grade_answer(QUESTION, ANSWER, company="Acme", job_title="SRE")

        prompt = client.prompts[0]
        assert ANSWER in prompt.user_prompt
        assert QUESTION in prompt.user_prompt
        assert "Company: Acme" in prompt.user_prompt
        assert "Role / position: SRE" in prompt.user_prompt

    def test_fenced_overall_score_scenario(self, scripted_client):
        from answer_grader.pipeline import GradingPipeline

        client = scripted_client('```json\n{"score_overall":85}\n```')
        result = GradingPipeline(client).grade_answer("Describe your favourite project", ANSWER)

        assert result.ok
        assert result.evaluation.overall_score == 70
        assert result.evaluation.grade == "B"
        assert result.evaluation.strengths == ()
        assert result.evaluation.improvements == ()

    def test_accepts_session_payload_dict(self, scripted_client, full_payload_text):
        from answer_grader.pipeline import GradingPipeline

        client = scripted_client(full_payload_text)
        result = GradingPipeline(client).grade({
            "company": "Acme",
            "jobTitle": "Backend Engineer",
            "question": QUESTION,
            "answer": ANSWER,
        })

        assert result.ok
        assert "Role / position: Backend Engineer" in client.prompts[0].user_prompt

    def test_non_string_context_in_session_payload(self, scripted_client, full_payload_text):
        from answer_grader.pipeline import GradingPipeline

        client = scripted_client(full_payload_text)
        result = GradingPipeline(client).grade({"question": QUESTION, "answer": ANSWER, "company": 42})

        assert result.ok
        assert "Company: 42" in client.prompts[0].user_prompt

    def test_verbose_logs_metrics_summary(self, scripted_client, full_payload_text, caplog):
        from answer_grader.pipeline import GradingPipeline
        from answer_grader.utils import LogLevel

        pipeline = GradingPipeline(scripted_client(full_payload_text), log_level=LogLevel.VERBOSE)
        with caplog.at_level("DEBUG"):
            pipeline.grade_answer(QUESTION, ANSWER)

        assert "Grading Metrics: GRADING" in caplog.text
        assert "attempts: 1" in caplog.text
        assert "generation:" in caplog.text

    def test_to_dict_contract(self, scripted_client, full_payload_text):
        from answer_grader.pipeline import GradingPipeline

        result = GradingPipeline(scripted_client(full_payload_text)).grade_answer(QUESTION, ANSWER)
        output = result.to_dict()

        assert set(output) == {"data", "feedbackText"}
        assert output["data"]["overallScore"] == 64
        assert output["feedbackText"] == result.feedback_text
        json.dumps(output)

    def test_concurrent_calls_are_independent(self, scripted_client):
        from answer_grader.pipeline import GradingPipeline

        payloads = {
            score: json.dumps({"scores": {a: score for a in
                                          ("structure", "specificity", "logic", "tech_depth", "risk")}})
            for score in (6, 8, 10)
        }

        class EchoClient(scripted_client):
            def generate(self, prompt):
                self.prompts.append(prompt)
                for score, payload in payloads.items():
                    if f"score={score};" in prompt.user_prompt:
                        return payload
                return ""

        pipeline = GradingPipeline(EchoClient())
        results = {}

        def grade(score):
            results[score] = pipeline.grade_answer("Q", f"score={score};")

        threads = [threading.Thread(target=grade, args=(s,)) for s in payloads]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert {s: r.evaluation.overall_score for s, r in results.items()} == {6: 60, 8: 80, 10: 100}


class TestFallback:
    """Tests for failure handling at the pipeline boundary."""

    def test_transport_timeout(self, scripted_client):
        from answer_grader.llm import TransportError
        from answer_grader.pipeline import GradingPipeline, FailureKind, FallbackPolicy

        client = scripted_client(TransportError(TransportError.TIMEOUT, "timed out"))
        result = GradingPipeline(client).grade_answer("How would you design a URL shortener?", ANSWER)

        assert not result.ok
        assert result.failure is FailureKind.TRANSPORT
        assert result.evaluation.overall_score == 0
        assert result.evaluation.grade == "F"
        assert result.evaluation.category == "architecture"
        assert result.feedback_text == FallbackPolicy.MESSAGES[FailureKind.TRANSPORT]
        assert client.calls == 1

    def test_rate_limited_has_distinct_message(self, scripted_client):
        from answer_grader.llm import TransportError
        from answer_grader.pipeline import GradingPipeline, FailureKind

        client = scripted_client(TransportError(TransportError.RATE_LIMITED, "429", status_code=429))
        result = GradingPipeline(client).grade_answer(QUESTION, ANSWER)

        assert result.failure is FailureKind.RATE_LIMITED
        assert result.feedback_text
        assert result.feedback_text != GradingPipeline(client).fallback_policy.message_for(FailureKind.TRANSPORT)

    @pytest.mark.parametrize("raw", ["", "   ", "I cannot help with that.", '{"scores": {'])
    def test_malformed_output(self, scripted_client, raw):
        from answer_grader.pipeline import GradingPipeline, FailureKind

        result = GradingPipeline(scripted_client(raw)).grade_answer(QUESTION, ANSWER)

        assert result.failure is FailureKind.MALFORMED_OUTPUT
        assert result.evaluation.overall_score == 0
        assert result.evaluation.grade == "F"
        assert result.evaluation.category == "incident"
        assert result.feedback_text

    def test_oversized_number_literal_is_malformed(self, scripted_client):
        from answer_grader.pipeline import GradingPipeline, FailureKind

        raw = '{"scores": {"logic": ' + "9" * 5000 + '}}'
        result = GradingPipeline(scripted_client(raw)).grade_answer(QUESTION, ANSWER)

        assert result.failure is FailureKind.MALFORMED_OUTPUT

    def test_huge_integer_scores_are_clamped(self, scripted_client):
        from answer_grader.pipeline import GradingPipeline

        raw = '{"scores": {"structure": 1' + "0" * 400 + '}}'
        result = GradingPipeline(scripted_client(raw)).grade_answer(QUESTION, ANSWER)

        assert result.ok
        assert result.evaluation.sub_scores["structure"] == 10

    def test_malformed_output_is_logged(self, scripted_client, caplog):
        from answer_grader.pipeline import GradingPipeline

        with caplog.at_level("WARNING"):
            GradingPipeline(scripted_client("no json here")).grade_answer(QUESTION, ANSWER)

        assert "no json here" in caplog.text

    def test_non_string_output_is_malformed(self, scripted_client):
        from answer_grader.pipeline import GradingPipeline, FailureKind

        result = GradingPipeline(scripted_client(None)).grade_answer(QUESTION, ANSWER)

        assert result.failure is FailureKind.MALFORMED_OUTPUT

    def test_unexpected_client_exception(self, scripted_client):
        from answer_grader.pipeline import GradingPipeline, FailureKind

        result = GradingPipeline(scripted_client(RuntimeError("boom"))).grade_answer(QUESTION, ANSWER)

        assert result.failure is FailureKind.TRANSPORT
        assert "boom" in result.detail

    def test_internal_error_during_normalization(self, scripted_client, full_payload_text):
        from answer_grader.pipeline import GradingPipeline, FailureKind

        class BrokenNormalizer:
            aggregator = None

            def normalize(self, value, question=""):
                raise ValueError("normalizer bug")

        pipeline = GradingPipeline(scripted_client(full_payload_text), normalizer=BrokenNormalizer())
        result = pipeline.grade_answer(QUESTION, ANSWER)

        assert result.failure is FailureKind.INTERNAL
        assert result.evaluation.grade == "F"
        assert result.evaluation.category == "incident"

    def test_bad_request_type_never_raises(self, scripted_client):
        from answer_grader.pipeline import GradingPipeline, FailureKind

        result = GradingPipeline(scripted_client("{}")).grade(["not", "a", "request"])

        assert result.failure is FailureKind.INTERNAL
        assert result.evaluation.category == "general"

    def test_missing_fields_in_session_payload(self, scripted_client):
        from answer_grader.pipeline import GradingPipeline

        result = GradingPipeline(scripted_client("{}")).grade({"question": None})

        assert result.ok
        assert result.evaluation.overall_score == 70


class TestRetry:
    """Tests for the opt-in retry of timeouts and rate limits."""

    def test_no_retry_by_default(self, scripted_client, full_payload_text):
        from answer_grader.llm import TransportError
        from answer_grader.pipeline import GradingPipeline

        client = scripted_client(TransportError(TransportError.RATE_LIMITED), full_payload_text)
        result = GradingPipeline(client, sleep=lambda s: None).grade_answer(QUESTION, ANSWER)

        assert not result.ok
        assert client.calls == 1

    def test_retries_rate_limit_then_succeeds(self, scripted_client, full_payload_text):
        from answer_grader.llm import TransportError
        from answer_grader.pipeline import GradingPipeline

        sleeps = []
        client = scripted_client(
            TransportError(TransportError.RATE_LIMITED),
            TransportError(TransportError.TIMEOUT),
            full_payload_text
        )
        pipeline = GradingPipeline(client, max_retries=2, retry_delay=1.5, sleep=sleeps.append)
        result = pipeline.grade_answer(QUESTION, ANSWER)

        assert result.ok
        assert result.attempts == 3
        assert sleeps == [1.5, 3.0]

    def test_gives_up_after_max_retries(self, scripted_client):
        from answer_grader.llm import TransportError
        from answer_grader.pipeline import GradingPipeline, FailureKind

        client = scripted_client(TransportError(TransportError.TIMEOUT))
        result = GradingPipeline(client, max_retries=2, sleep=lambda s: None).grade_answer(QUESTION, ANSWER)

        assert result.failure is FailureKind.TRANSPORT
        assert result.attempts == 3
        assert client.calls == 3

    def test_unknown_errors_not_retried(self, scripted_client):
        from answer_grader.llm import TransportError
        from answer_grader.pipeline import GradingPipeline

        client = scripted_client(TransportError(TransportError.UNKNOWN, "HTTP 500", status_code=500))
        result = GradingPipeline(client, max_retries=3, sleep=lambda s: None).grade_answer(QUESTION, ANSWER)

        assert not result.ok
        assert client.calls == 1

    def test_malformed_output_not_retried(self, scripted_client):
        from answer_grader.pipeline import GradingPipeline

        client = scripted_client("not json")
        GradingPipeline(client, max_retries=3, sleep=lambda s: None).grade_answer(QUESTION, ANSWER)

        assert client.calls == 1


class TestCreateGradingPipeline:
    """Tests for the config-driven factory."""

    def test_uses_given_client(self, scripted_client, full_payload_text):
        from answer_grader.pipeline import create_grading_pipeline

        client = scripted_client(full_payload_text, model="gpt-4.1-mini")
        pipeline = create_grading_pipeline(client=client)

        assert pipeline.client is client
        assert pipeline.max_retries == 0
        assert pipeline.normalizer.aggregator.apply_leniency is True

    def test_balanced_profile_disables_leniency(self, scripted_client):
        from answer_grader.pipeline import create_grading_pipeline

        pipeline = create_grading_pipeline(client=scripted_client("{}"), model="mistral:7b")

        assert pipeline.normalizer.aggregator.apply_leniency is False

    def test_builds_ollama_client(self):
        from answer_grader.llm import OllamaClient
        from answer_grader.pipeline import create_grading_pipeline

        pipeline = create_grading_pipeline(provider="ollama", model="llama3:8b")

        assert isinstance(pipeline.client, OllamaClient)
        assert pipeline.client.model == "llama3:8b"
        assert pipeline.client.temperature == 0.2

    def test_unknown_provider(self):
        from answer_grader.pipeline import create_grading_pipeline

        with pytest.raises(ValueError):
            create_grading_pipeline(provider="carrier-pigeon")
