"""Known providers and models, as offered by the settings UI."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ProviderInfo:
    """Static description of one provider."""
    provider_id: str
    display_name: str
    default_chat_model: str
    default_embedding_model: Optional[str]  # None: chat-only provider
    models: List[Dict[str, str]] = field(default_factory=list)

    @property
    def supports_embeddings(self) -> bool:
        return self.default_embedding_model is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.provider_id,
            "name": self.display_name,
            "default_chat_model": self.default_chat_model,
            "default_embedding_model": self.default_embedding_model,
            "supports_embeddings": self.supports_embeddings,
            "models": list(self.models),
        }


PROVIDER_CATALOG: Dict[str, ProviderInfo] = {
    "gemini": ProviderInfo(
        provider_id="gemini",
        display_name="Google Gemini (AI Studio)",
        default_chat_model="gemini-1.5-flash",
        default_embedding_model="text-embedding-004",
        models=[
            {"id": "gemini-2.5-flash-lite", "name": "Gemini 2.5 Flash Lite", "type": "chat"},
            {"id": "gemini-2.5-flash", "name": "Gemini 2.5 Flash", "type": "chat"},
            {"id": "gemini-2.5-pro", "name": "Gemini 2.5 Pro", "type": "chat"},
            {"id": "gemini-2.0-flash", "name": "Gemini 2.0 Flash", "type": "chat"},
            {"id": "gemini-1.5-pro", "name": "Gemini 1.5 Pro", "type": "chat"},
            {"id": "gemini-1.5-flash", "name": "Gemini 1.5 Flash", "type": "chat"},
            {"id": "text-embedding-004", "name": "Text Embedding 004", "type": "embedding"},
        ],
    ),
    "vertex": ProviderInfo(
        provider_id="vertex",
        display_name="Google Vertex AI (Enterprise)",
        default_chat_model="gemini-1.5-flash-001",
        default_embedding_model="text-embedding-004",
        models=[
            {"id": "gemini-2.5-flash-001", "name": "Gemini 2.5 Flash", "type": "chat"},
            {"id": "gemini-2.5-pro-001", "name": "Gemini 2.5 Pro", "type": "chat"},
            {"id": "gemini-1.5-flash-001", "name": "Gemini 1.5 Flash", "type": "chat"},
            {"id": "gemini-1.5-pro-001", "name": "Gemini 1.5 Pro", "type": "chat"},
            {"id": "text-embedding-004", "name": "Text Embedding 004", "type": "embedding"},
        ],
    ),
    "openai": ProviderInfo(
        provider_id="openai",
        display_name="OpenAI",
        default_chat_model="gpt-4o-mini",
        default_embedding_model="text-embedding-3-small",
        models=[
            {"id": "gpt-4o", "name": "GPT-4o", "type": "chat"},
            {"id": "gpt-4o-mini", "name": "GPT-4o Mini", "type": "chat"},
            {"id": "gpt-4-turbo", "name": "GPT-4 Turbo", "type": "chat"},
            {"id": "gpt-3.5-turbo", "name": "GPT-3.5 Turbo", "type": "chat"},
            {"id": "text-embedding-3-small", "name": "Text Embedding 3 Small", "type": "embedding"},
            {"id": "text-embedding-3-large", "name": "Text Embedding 3 Large", "type": "embedding"},
        ],
    ),
    "anthropic": ProviderInfo(
        provider_id="anthropic",
        display_name="Anthropic",
        default_chat_model="claude-3-5-sonnet-latest",
        default_embedding_model=None,
        models=[
            {"id": "claude-3-5-sonnet-latest", "name": "Claude 3.5 Sonnet", "type": "chat"},
            {"id": "claude-3-5-haiku-latest", "name": "Claude 3.5 Haiku", "type": "chat"},
            {"id": "claude-3-opus-latest", "name": "Claude 3 Opus", "type": "chat"},
        ],
    ),
    "ollama": ProviderInfo(
        provider_id="ollama",
        display_name="Ollama (local)",
        default_chat_model="llama3",
        default_embedding_model="nomic-embed-text",
        models=[
            {"id": "llama3", "name": "Llama 3", "type": "chat"},
            {"id": "qwen3:14b", "name": "Qwen3 14B", "type": "chat"},
            {"id": "nomic-embed-text", "name": "Nomic Embed Text", "type": "embedding"},
        ],
    ),
}

SUPPORTED_PROVIDERS = tuple(PROVIDER_CATALOG)

# Used when the selected embedding provider is chat-only
FALLBACK_EMBEDDING_PROVIDER = "gemini"
FALLBACK_EMBEDDING_MODEL = "text-embedding-004"


def get_provider_info(provider: str) -> Optional[ProviderInfo]:
    return PROVIDER_CATALOG.get((provider or "").lower())


def list_models(provider: str, kind: Optional[str] = None) -> List[Dict[str, str]]:
    """Models known for *provider*, optionally filtered by kind ('chat' or 'embedding')."""
    info = get_provider_info(provider)
    if info is None:
        return []
    if kind is None:
        return list(info.models)
    return [m for m in info.models if m["type"] == kind]
