"""Google Vertex AI provider - project/region scoped Gemini and text-embedding models."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import google.auth
import httpx
from google.auth.exceptions import DefaultCredentialsError, GoogleAuthError, TransportError
from google.auth.transport.requests import Request as GoogleAuthRequest

from memhub.services.exceptions import ConfigurationError, GenerationError, TransientProviderError
from .gemini_provider import build_generate_content_payload, extract_candidate_text
from .http_client import get_http_client, post_json

logger = logging.getLogger(__name__)

VERTEX_SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]


class VertexProvider:
    """LLM provider for Vertex AI, authenticated with Application Default Credentials.

    Credentials are resolved lazily on the first request, so constructing the
    provider never touches the network.
    """

    def __init__(
        self,
        project_id: str,
        location: str = "us-central1",
        http_client: Optional[httpx.Client] = None,
        credentials: Any = None,
    ):
        """Initialize the Vertex AI provider.

        Args:
            project_id: Google Cloud project id
            location: Vertex AI region (e.g., 'us-central1')
            http_client: Optional client (defaults to the shared provider client)
            credentials: Optional google-auth credentials (defaults to ADC)
        """
        self._project_id = project_id
        self._location = location
        self._http_client = http_client or get_http_client()
        self._credentials = credentials

    @property
    def provider_name(self) -> str:
        return "vertex"

    @property
    def supports_embeddings(self) -> bool:
        return True

    @property
    def supports_native_json(self) -> bool:
        return True

    def _model_url(self, model: str) -> str:
        return (
            f"https://{self._location}-aiplatform.googleapis.com/v1/projects/{self._project_id}"
            f"/locations/{self._location}/publishers/google/models/{model}"
        )

    def _headers(self) -> Dict[str, str]:
        try:
            if self._credentials is None:
                self._credentials, _ = google.auth.default(scopes=VERTEX_SCOPES)
            if not self._credentials.valid:
                self._credentials.refresh(GoogleAuthRequest())
        except DefaultCredentialsError as e:
            raise ConfigurationError(f"Vertex AI credentials not available: {e}") from e
        except TransportError as e:
            raise TransientProviderError(f"Token refresh failed: {e}", provider=self.provider_name) from e
        except GoogleAuthError as e:
            raise GenerationError(f"Vertex AI authentication failed: {e}", provider=self.provider_name) from e

        return {
            "Authorization": f"Bearer {self._credentials.token}",
            "Content-Type": "application/json",
        }

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
            f"{self._model_url(model)}:generateContent",
            payload,
            headers=self._headers(),
        )
        return extract_candidate_text(data)

    def embed(self, model: str, text: str) -> Any:
        payload = {"instances": [{"content": text}]}
        data = post_json(
            self._http_client,
            self.provider_name,
            f"{self._model_url(model)}:predict",
            payload,
            headers=self._headers(),
        )
        # {"predictions": [{"embeddings": {"values": [...], "statistics": {...}}}]}
        predictions = data.get("predictions") or []
        if not predictions:
            return None
        return predictions[0].get("embeddings")

    def is_available(self) -> bool:
        """Check if a project id is configured."""
        return bool(self._project_id)
