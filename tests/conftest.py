"""
Shared fixtures for the grader tests: a scripted generation backend and
canned upstream payloads. Nothing here touches the network.
"""
import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from answer_grader.llm import GenerationClient


class ScriptedClient(GenerationClient):
    """
    Generation client that replays a script.

    Each script entry is either a string (returned as the raw output) or an
    exception instance (raised). The last entry repeats once the script runs out.
    """

    def __init__(self, *script, model: str = "scripted"):
        self.script = list(script) or [""]
        self.model = model
        self.prompts = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def generate(self, prompt):
        self.prompts.append(prompt)
        index = min(len(self.prompts), len(self.script)) - 1
        step = self.script[index]
        if isinstance(step, BaseException):
            raise step
        return step


@pytest.fixture
def scripted_client():
    """Factory fixture: scripted_client('{...}', TransportError(...), ...)."""
    return ScriptedClient


@pytest.fixture
def full_payload():
    """A well-formed upstream payload in the service's snake_case shape."""
    return {
        "score_overall": 12,
        "scores": {"structure": 8, "specificity": 6, "logic": 7, "tech_depth": 5, "risk": 4},
        "strengths": ["Clear STAR structure", "Owns the decision"],
        "gaps": ["No latency numbers"],
        "adds": ["Quantify the impact"],
        "pitfalls": [{"text": "Blaming another team", "level": 2}],
        "next": ["Rehearse the result section"],
        "logic_flaws": ["Jumps from cause to fix"],
        "missing_details": ["Rollback plan"],
        "risk_points": ["No monitoring mentioned"],
        "improvements": [
            {"before": "We fixed it.", "after": "I rolled back within 10 minutes.", "reason": "Concrete"}
        ],
        "polished": "During the outage I led the rollback and cut error rates from 30% to 0.1%.",
        "follow_up_questions": [{"question": "How did you detect it?", "reason": "Checks monitoring"}],
        "keywords": ["rollback", "on-call"],
        "summary_interviewer": "Solid incident story with clear ownership.",
        "summary_coach": "Add numbers to the result.",
        "category": "incident",
    }


@pytest.fixture
def full_payload_text(full_payload):
    return json.dumps(full_payload)
