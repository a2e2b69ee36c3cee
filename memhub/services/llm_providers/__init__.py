"""LLM Provider abstraction layer.

Enables switching between LLM providers (Gemini, Vertex AI, OpenAI, Anthropic, Ollama)
through the settings store.

Usage:
    from memhub.services.llm_providers import create_client

    client = create_client("openai", config)
    text = client.complete(model="gpt-4o-mini", prompt="...")

Configuration:
    The `ai_provider` / `embedding_provider` settings pick the provider;
    `ai_model` / `embedding_model` override the catalog defaults.
"""
from .anthropic_provider import AnthropicProvider
from .base import LLMProvider
from .catalog import PROVIDER_CATALOG, ProviderInfo, get_provider_info, list_models
from .factory import create_client, create_llm_provider, resolve_chat_model
from .gemini_provider import GeminiProvider
from .ollama_provider import OllamaProvider
from .openai_provider import OpenAIProvider
from .vertex_provider import VertexProvider

__all__ = [
    "LLMProvider",
    "ProviderInfo",
    "PROVIDER_CATALOG",
    "get_provider_info",
    "list_models",
    "create_client",
    "create_llm_provider",
    "resolve_chat_model",
    "GeminiProvider",
    "VertexProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "OllamaProvider",
]
