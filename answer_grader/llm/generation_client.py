"""
Generation Client - Wrapper around the external text-generation service.

This is the only part of the grader that performs network I/O. A client sends
one request per call, enforces its timeout, and hands back the raw text
without interpreting it. Retrying is left to the caller.
"""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
import logging

import requests

from ..prompts.templates import PromptPair

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """
    The generation service call failed before any content came back.

    Attributes:
        reason: 'timeout', 'rate_limited' or 'unknown'
        status_code: HTTP status when the service answered with an error
    """
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    UNKNOWN = "unknown"

    def __init__(self, reason: str, message: str = "", status_code: Optional[int] = None):
        self.reason = reason
        self.status_code = status_code
        super().__init__(message or reason)

    @property
    def is_retryable(self) -> bool:
        return self.reason in (self.TIMEOUT, self.RATE_LIMITED)


class GenerationClient(ABC):
    """Base class for generation backends."""

    model: str = "unknown"

    @abstractmethod
    def generate(self, prompt: PromptPair) -> str:
        """
        Send one grading prompt and return the raw output text.

        Raises:
            TransportError: the call timed out, was rate limited or failed
        """
        raise NotImplementedError


def _post_json(url: str, payload: Dict[str, Any], timeout: float,
               headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """POST a JSON payload and translate transport failures into TransportError."""
    try:
        response = requests.post(url, json=payload, headers=headers, timeout=timeout)
    except requests.Timeout as e:
        raise TransportError(TransportError.TIMEOUT, f"Request to {url} timed out after {timeout}s") from e
    except requests.RequestException as e:
        raise TransportError(TransportError.UNKNOWN, f"Request to {url} failed: {e}") from e

    if response.status_code == 429:
        raise TransportError(
            TransportError.RATE_LIMITED,
            f"Rate limited by {url}",
            status_code=response.status_code
        )

    try:
        response.raise_for_status()
    except requests.HTTPError as e:
        raise TransportError(
            TransportError.UNKNOWN,
            f"HTTP {response.status_code} from {url}",
            status_code=response.status_code
        ) from e

    try:
        return response.json()
    except ValueError as e:
        raise TransportError(
            TransportError.UNKNOWN,
            f"Response from {url} was not JSON",
            status_code=response.status_code
        ) from e


class ChatCompletionsClient(GenerationClient):
    """Client for OpenAI-compatible chat completion endpoints."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4.1-mini",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60,
        temperature: float = 0.35,
        max_tokens: int = 2000
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

        if not api_key:
            logger.warning("No API key configured for the chat completions client")

    def generate(self, prompt: PromptPair) -> str:
        payload = {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": prompt.system_prompt},
                {"role": "user", "content": prompt.user_prompt},
            ],
        }
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else None

        logger.debug(
            f"Chat completion request: model={self.model}, scale=0-{prompt.score_scale.value}, "
            f"{len(prompt.user_prompt)} prompt chars"
        )
        result = _post_json(f"{self.base_url}/chat/completions", payload, self.timeout, headers)

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise TransportError(TransportError.UNKNOWN, "Chat completion response had no message content") from e

        return content or ""
