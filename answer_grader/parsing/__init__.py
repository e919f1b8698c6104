"""
Parsing Module - JSON payload extraction from raw generation output.
"""
from .response_extractor import (
    ExtractionResult,
    MalformedOutputError,
    extract_json_payload,
    strip_code_fence
)

__all__ = [
    "ExtractionResult",
    "MalformedOutputError",
    "extract_json_payload",
    "strip_code_fence"
]
