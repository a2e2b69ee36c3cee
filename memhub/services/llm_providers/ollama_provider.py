"""Ollama LLM Provider - wraps the Ollama client for a local model server."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from ollama import Client, ResponseError

from memhub.config import settings
from memhub.services.exceptions import GenerationError, TransientProviderError
from .http_client import TRANSIENT_STATUS_CODES

logger = logging.getLogger(__name__)


class OllamaProvider:
    """LLM provider wrapping the Ollama client."""

    def __init__(self, host: str, client: Optional[Client] = None):
        """Initialize the Ollama provider.

        Args:
            host: Ollama server URL (e.g., 'http://localhost:11434')
            client: Optional pre-built client (tests)
        """
        self._host = host
        self._client = client or Client(host=host, timeout=settings.LLM_REQUEST_TIMEOUT)
        logger.debug(f"Initialized OllamaProvider with host: {host}")

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def supports_embeddings(self) -> bool:
        return True

    @property
    def supports_native_json(self) -> bool:
        return True

    def _translate(self, e: Exception) -> GenerationError:
        if isinstance(e, ResponseError):
            error_cls = TransientProviderError if e.status_code in TRANSIENT_STATUS_CODES else GenerationError
            return error_cls(f"Ollama error {e.status_code}: {e.error}", provider=self.provider_name)
        return TransientProviderError(f"Ollama unreachable at {self._host}: {e}", provider=self.provider_name)

    def complete(
        self,
        model: str,
        prompt: str,
        system_instruction: Optional[str] = None,
        json_mode: bool = False,
    ) -> str:
        """Send chat completion via Ollama.

        Args:
            model: Model name (e.g., 'llama3', 'qwen3:14b')
            prompt: User prompt
            system_instruction: Optional system message
            json_mode: Ask Ollama to constrain output to JSON

        Returns:
            Assistant message content ("" when empty)
        """
        messages: List[Dict[str, Any]] = [{"role": "user", "content": prompt}]
        if system_instruction:
            messages.insert(0, {"role": "system", "content": system_instruction})

        try:
            response = self._client.chat(
                model=model,
                messages=messages,
                format="json" if json_mode else None,
            )
        except (ResponseError, httpx.HTTPError) as e:
            raise self._translate(e) from e

        message = response.get("message") or {}
        return message.get("content") or ""

    def embed(self, model: str, text: str) -> Any:
        try:
            response = self._client.embeddings(model=model, prompt=text)
        except (ResponseError, httpx.HTTPError) as e:
            raise self._translate(e) from e
        return response.get("embedding")

    def is_available(self) -> bool:
        """Check if Ollama server is reachable."""
        try:
            resp = httpx.get(f"{self._host}/", timeout=5.0)
            return resp.status_code == 200
        except Exception as e:
            logger.debug(f"Ollama availability check failed: {e}")
            return False
