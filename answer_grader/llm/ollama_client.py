"""
Ollama Client - Local LLM inference backend for grading.
"""
from typing import Optional
import logging

import requests

from .generation_client import GenerationClient, TransportError, _post_json
from ..prompts.templates import PromptPair

logger = logging.getLogger(__name__)


class OllamaClient(GenerationClient):
    """Client for Ollama local LLM inference."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "mistral:7b",
        timeout: float = 120,
        temperature: float = 0.35,
        max_tokens: int = 2000,
        verify: bool = False
    ):
        self.base_url = base_url.rstrip('/')
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

        if verify:
            self._verify_connection()

    def _verify_connection(self):
        """Verify Ollama is running and model is available."""
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=10)
            response.raise_for_status()

            models = response.json().get('models', [])
            model_names = [m['name'] for m in models]

            model_base = self.model.split(':')[0]
            available = any(model_base in name for name in model_names)

            if not available:
                logger.warning(
                    f"Model '{self.model}' may not be available. "
                    f"Available models: {model_names}"
                )
            else:
                logger.info(f"Ollama connected. Model: {self.model}")

        except requests.RequestException as e:
            logger.error(f"Could not connect to Ollama at {self.base_url}: {e}")
            raise ConnectionError(
                f"Ollama is not running or not accessible at {self.base_url}. "
                "Please start Ollama with: ollama serve"
            )

    def generate(self, prompt: PromptPair) -> str:
        payload = {
            "model": self.model,
            "prompt": prompt.user_prompt,
            "system": prompt.system_prompt,
            "format": "json",
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            }
        }

        result = _post_json(f"{self.base_url}/api/generate", payload, self.timeout)

        if not isinstance(result, dict) or 'response' not in result:
            raise TransportError(TransportError.UNKNOWN, "Ollama response had no 'response' field")
        return result.get('response') or ''

    def is_available(self) -> bool:
        """Check if Ollama is reachable."""
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=5)
            return response.status_code == 200
        except requests.RequestException:
            return False
