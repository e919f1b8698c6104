"""
Response Extractor - Isolates the JSON payload from raw generation output.

The service is told to return bare JSON but sometimes wraps it in a code
fence or adds a sentence before or after it. Extraction never raises: it
returns an ExtractionResult that is either a parsed value or a
MalformedOutputError describing why nothing usable was found.
"""
import json
import re
from typing import Any, Optional
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

# A whole-payload code fence, optionally tagged with a language
FENCE_PATTERN = re.compile(r'^```[A-Za-z0-9_-]*\s*\n?([\s\S]*?)\n?\s*```$')


class MalformedOutputError(Exception):
    """The generation output contained no recoverable JSON object."""
    EMPTY = "empty"
    NO_OBJECT = "no_object"
    INVALID_JSON = "invalid_json"

    def __init__(self, reason: str, raw_text: str = "", detail: str = ""):
        self.reason = reason
        self.raw_text = raw_text
        self.detail = detail
        message = f"Malformed generation output ({reason})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


@dataclass(frozen=True)
class ExtractionResult:
    """Tagged outcome of extraction: a parsed value or an error, never both."""
    success: bool
    value: Any = None
    error: Optional[MalformedOutputError] = None

    @classmethod
    def ok(cls, value: Any) -> "ExtractionResult":
        return cls(True, value, None)

    @classmethod
    def failed(cls, error: MalformedOutputError) -> "ExtractionResult":
        return cls(False, None, error)


def strip_code_fence(text: str) -> str:
    """Remove a code fence wrapping the whole text, if there is one."""
    match = FENCE_PATTERN.match(text)
    if match:
        return match.group(1).strip()
    return text


def extract_json_payload(raw_text: Optional[str]) -> ExtractionResult:
    """
    Extract and parse the JSON object from raw generation output.

    Steps:
        1. Trim surrounding whitespace (empty input is a failure)
        2. Strip a wrapping code fence
        3. Keep the span from the first '{' to the last '}'
        4. Parse that span as JSON

    Args:
        raw_text: Text returned by the generation service

    Returns:
        ExtractionResult with the parsed value or a MalformedOutputError
    """
    text = (raw_text or "").strip()
    if not text:
        return ExtractionResult.failed(MalformedOutputError(MalformedOutputError.EMPTY, raw_text or ""))

    text = strip_code_fence(text)

    start = text.find('{')
    end = text.rfind('}')
    if start == -1 or end < start:
        return ExtractionResult.failed(
            MalformedOutputError(MalformedOutputError.NO_OBJECT, raw_text, "no '{...}' span found")
        )

    candidate = text[start:end + 1]
    try:
        value = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, the int-digit limit on long number literals, or deep nesting
        return ExtractionResult.failed(
            MalformedOutputError(MalformedOutputError.INVALID_JSON, raw_text, str(e))
        )

    if start > 0 or end < len(text) - 1:
        logger.debug(f"Discarded {start + len(text) - 1 - end} chars of text around the JSON payload")

    return ExtractionResult.ok(value)
