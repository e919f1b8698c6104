"""
Prompts Module - Prompt templates for interview answer grading.
"""
from .templates import (
    GradingPromptTemplates,
    PromptPair,
    build_grading_prompt,
    UNSPECIFIED
)

__all__ = [
    "GradingPromptTemplates",
    "PromptPair",
    "build_grading_prompt",
    "UNSPECIFIED"
]
