"""
LLM Module - Clients for the external text-generation service.
"""
from typing import Optional

from .generation_client import GenerationClient, ChatCompletionsClient, TransportError
from .ollama_client import OllamaClient

PROVIDERS = ("openai", "ollama")


def create_generation_client(
    provider: str = "openai",
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout: float = 60,
    temperature: float = 0.35,
    max_tokens: int = 2000
) -> GenerationClient:
    """
    Factory for a generation backend.

    Args:
        provider: 'openai' (any chat-completions compatible endpoint) or 'ollama'
        model: Model name; backend default when omitted
        api_key: Credential for chat-completions endpoints
        base_url: Endpoint root; backend default when omitted
        timeout: Per-call timeout in seconds
        temperature: Sampling temperature
        max_tokens: Maximum output size

    Returns:
        Configured GenerationClient
    """
    if provider == "openai":
        kwargs = {"base_url": base_url} if base_url else {}
        return ChatCompletionsClient(
            api_key=api_key,
            model=model or "gpt-4.1-mini",
            timeout=timeout,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs
        )
    if provider == "ollama":
        kwargs = {"base_url": base_url} if base_url else {}
        return OllamaClient(
            model=model or "mistral:7b",
            timeout=timeout,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs
        )
    raise ValueError(f"Unknown generation provider '{provider}'. Expected one of: {', '.join(PROVIDERS)}")


__all__ = [
    "GenerationClient",
    "ChatCompletionsClient",
    "OllamaClient",
    "TransportError",
    "create_generation_client",
    "PROVIDERS"
]
