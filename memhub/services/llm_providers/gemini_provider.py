"""Google Gemini (AI Studio) provider - REST generateContent / embedContent with an API key."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .http_client import get_http_client, post_json

logger = logging.getLogger(__name__)

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta"


def build_generate_content_payload(
    prompt: str,
    system_instruction: Optional[str] = None,
    json_mode: bool = False,
) -> Dict[str, Any]:
    """Request body shared by Gemini AI Studio and Vertex AI generateContent."""
    payload: Dict[str, Any] = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
    }
    if system_instruction:
        payload["systemInstruction"] = {"role": "system", "parts": [{"text": system_instruction}]}
    if json_mode:
        payload["generationConfig"] = {"responseMimeType": "application/json"}
    return payload


def extract_candidate_text(data: Dict[str, Any]) -> str:
    """First text part of the first candidate, or "" when the response carries none."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    for part in parts:
        if isinstance(part, dict) and part.get("text"):
            return part["text"]
    return ""


class GeminiProvider:
    """LLM provider for the Gemini API (AI Studio keys)."""

    def __init__(self, api_key: str, http_client: Optional[httpx.Client] = None):
        """Initialize the Gemini provider.

        Args:
            api_key: AI Studio API key
            http_client: Optional client (defaults to the shared provider client)
        """
        self._api_key = api_key
        self._http_client = http_client or get_http_client()

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def supports_embeddings(self) -> bool:
        return True

    @property
    def supports_native_json(self) -> bool:
        return True

    def _headers(self) -> Dict[str, str]:
        return {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}

    def complete(
        self,
        model: str,
        prompt: str,
        system_instruction: Optional[str] = None,
        json_mode: bool = False,
    ) -> str:
        payload = build_generate_content_payload(prompt, system_instruction, json_mode)
        data = post_json(
            self._http_client,
            self.provider_name,
            f"{GEMINI_API_URL}/models/{model}:generateContent",
            payload,
            headers=self._headers(),
        )
        return extract_candidate_text(data)

    def embed(self, model: str, text: str) -> Any:
        logger.debug(f"Generating embedding using model: {model}")
        payload = {
            "model": f"models/{model}",
            "content": {"parts": [{"text": text}]},
        }
        data = post_json(
            self._http_client,
            self.provider_name,
            f"{GEMINI_API_URL}/models/{model}:embedContent",
            payload,
            headers=self._headers(),
        )
        # {"embedding": {"values": [...]}}
        return data.get("embedding")

    def is_available(self) -> bool:
        """Check if an API key is configured."""
        return bool(self._api_key)
