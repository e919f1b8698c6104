"""
Configuration settings for the Interview Answer Grader.

Read once by create_grading_pipeline(); the grading core itself only sees the
explicit values passed to its constructors.
"""
import os


# Generation service
GENERATION_PROVIDER = os.getenv("GENERATION_PROVIDER", "openai")  # "openai" or "ollama"
GENERATION_TIMEOUT = float(os.getenv("GENERATION_TIMEOUT", "60"))

# OpenAI-compatible chat completions endpoint
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4.1-mini")

# Ollama settings
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "mistral:7b")

# Logging verbosity: minimal, standard or verbose
LOG_LEVEL = os.getenv("LOG_LEVEL", "standard").lower()


class LLMConfig:
    """Configuration for LLM generation."""
    GRADING_TEMPERATURE = 0.35
    MAX_OUTPUT_TOKENS = 2000
    MAX_RETRIES = 0        # Retries on timeout / rate limit; 0 goes straight to fallback
    RETRY_DELAY = 2


class GradingConfig:
    """Configuration for grading output and caller-side limits."""
    MAX_ANSWER_CHARS = 8000   # Enforced by the CLI and UI, never by the core
    NEUTRAL_SUB_SCORE = 7     # Stands in for missing or non-numeric sub-scores
    MIN_POLISHED_CHARS = 20
    LIST_LIMITS = {
        "strengths": 4,
        "gaps": 4,
        "adds": 4,
        "next": 4,
        "keywords": 6,
        "risk_points": 3,
        "logic_flaws": 3,
        "missing_details": 3,
        "pitfalls": 4,
        "improvements": 3,
        "follow_up_questions": 3,
    }


class ModelConfig:
    """Model-specific configuration for grading behavior."""

    # Format: "model_name": {"temperature": float, "max_tokens": int, "strictness_adjustment": str}
    # "lenient" turns on the leniency transform before averaging sub-scores
    MODEL_PROFILES = {
        "gpt-4.1-mini": {
            "temperature": 0.35,
            "max_tokens": 2000,
            "strictness_adjustment": "lenient",
            "notes": "Default hosted model - grades harshly for junior candidates"
        },
        "gpt-4.1": {
            "temperature": 0.3,
            "max_tokens": 2000,
            "strictness_adjustment": "lenient",
        },
        "gpt-4o-mini": {
            "temperature": 0.35,
            "max_tokens": 2000,
            "strictness_adjustment": "lenient",
        },
        "mistral:7b": {
            "temperature": 0.1,
            "max_tokens": 1500,
            "strictness_adjustment": "balanced",
            "notes": "7B params - well-tested, produces fair grades"
        },
        "llama3": {
            "temperature": 0.2,
            "max_tokens": 1500,
            "strictness_adjustment": "lenient",
        },
    }

    # Default fallback for unknown models
    DEFAULT_PROFILE = {
        "temperature": LLMConfig.GRADING_TEMPERATURE,
        "max_tokens": LLMConfig.MAX_OUTPUT_TOKENS,
        "strictness_adjustment": "lenient",  # Err on side of leniency for unknowns
    }

    @classmethod
    def get_model_config(cls, model_name: str) -> dict:
        """Get configuration for a specific model."""
        model_name = model_name or ""

        # Try exact match first
        if model_name in cls.MODEL_PROFILES:
            return cls.MODEL_PROFILES[model_name]

        # Try prefix match (e.g., "llama3:8b" matches "llama3")
        for profile_name, config in cls.MODEL_PROFILES.items():
            if model_name.startswith(profile_name):
                return config

        return cls.DEFAULT_PROFILE
