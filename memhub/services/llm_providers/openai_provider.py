"""OpenAI provider - chat completions and embeddings over the REST API."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from .http_client import get_http_client, post_json

logger = logging.getLogger(__name__)

OPENAI_API_URL = "https://api.openai.com/v1"


class OpenAIProvider:
    """LLM provider for OpenAI (or any OpenAI-compatible base URL)."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize the OpenAI provider.

        Args:
            api_key: OpenAI API key
            base_url: Optional compatible endpoint, including the version path (e.g. 'https://proxy/v1')
            http_client: Optional client (defaults to the shared provider client)
        """
        self._api_key = api_key
        self._base_url = (base_url or OPENAI_API_URL).rstrip("/")
        self._http_client = http_client or get_http_client()

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def supports_embeddings(self) -> bool:
        return True

    @property
    def supports_native_json(self) -> bool:
        return True

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def complete(
        self,
        model: str,
        prompt: str,
        system_instruction: Optional[str] = None,
        json_mode: bool = False,
    ) -> str:
        messages: List[Dict[str, str]] = [{"role": "user", "content": prompt}]
        if system_instruction:
            messages.insert(0, {"role": "system", "content": system_instruction})

        payload: Dict[str, Any] = {"model": model, "messages": messages}
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        data = post_json(
            self._http_client,
            self.provider_name,
            f"{self._base_url}/chat/completions",
            payload,
            headers=self._headers(),
        )

        usage = data.get("usage") or {}
        if usage:
            logger.info(f"OpenAI usage: tokens={usage.get('prompt_tokens', '?')}+{usage.get('completion_tokens', '?')}")

        choices = data.get("choices") or []
        if not choices:
            return ""
        return (choices[0].get("message") or {}).get("content") or ""

    def embed(self, model: str, text: str) -> Any:
        payload = {"model": model, "input": text, "encoding_format": "float"}
        data = post_json(
            self._http_client,
            self.provider_name,
            f"{self._base_url}/embeddings",
            payload,
            headers=self._headers(),
        )
        items = data.get("data") or []
        if not items:
            return None
        return items[0].get("embedding")

    def is_available(self) -> bool:
        """Check if an API key is configured."""
        return bool(self._api_key)
