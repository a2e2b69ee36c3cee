"""Anthropic provider - Messages API. Chat only: no embedding endpoint."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from memhub.services.exceptions import EmbeddingError
from .http_client import get_http_client, post_json

logger = logging.getLogger(__name__)

ANTHROPIC_API_URL = "https://api.anthropic.com"
ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS = 4000


class AnthropicProvider:
    """LLM provider for the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        """Initialize the Anthropic provider.

        Args:
            api_key: Anthropic API key
            base_url: Optional endpoint root without the version path
            http_client: Optional client (defaults to the shared provider client)
            max_tokens: Completion token cap sent with every request
        """
        self._api_key = api_key
        self._base_url = (base_url or ANTHROPIC_API_URL).rstrip("/")
        self._http_client = http_client or get_http_client()
        self._max_tokens = max_tokens

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def supports_embeddings(self) -> bool:
        return False

    @property
    def supports_native_json(self) -> bool:
        return False

    def complete(
        self,
        model: str,
        prompt: str,
        system_instruction: Optional[str] = None,
        json_mode: bool = False,
    ) -> str:
        payload: Dict[str, Any] = {
            "model": model,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_instruction:
            payload["system"] = system_instruction

        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }
        data = post_json(
            self._http_client,
            self.provider_name,
            f"{self._base_url}/v1/messages",
            payload,
            headers=headers,
        )

        for block in data.get("content") or []:
            if isinstance(block, dict) and block.get("type") == "text":
                return block.get("text") or ""
        return ""

    def embed(self, model: str, text: str) -> Any:
        raise EmbeddingError("Anthropic does not support embeddings", provider=self.provider_name)

    def is_available(self) -> bool:
        """Check if an API key is configured."""
        return bool(self._api_key)
