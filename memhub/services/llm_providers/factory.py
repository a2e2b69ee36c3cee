"""Factory functions for creating LLM provider clients from an AIConfig."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Tuple

from memhub.services.config_service import AIConfig
from memhub.services.exceptions import ConfigurationError
from .anthropic_provider import AnthropicProvider
from .base import LLMProvider
from .catalog import SUPPORTED_PROVIDERS, get_provider_info
from .gemini_provider import GeminiProvider
from .ollama_provider import OllamaProvider
from .openai_provider import OpenAIProvider
from .vertex_provider import VertexProvider

logger = logging.getLogger(__name__)

ClientBuilder = Callable[[AIConfig], LLMProvider]


def _build_gemini(config: AIConfig) -> LLMProvider:
    if not config.gemini_key:
        raise ConfigurationError("Gemini API Key not configured")
    return GeminiProvider(api_key=config.gemini_key)


def _build_vertex(config: AIConfig) -> LLMProvider:
    if not config.vertex_project_id:
        raise ConfigurationError("Vertex AI Project ID not configured")
    return VertexProvider(project_id=config.vertex_project_id, location=config.vertex_location or "us-central1")


def _build_openai(config: AIConfig) -> LLMProvider:
    if not config.openai_key:
        raise ConfigurationError("OpenAI API Key not configured")
    return OpenAIProvider(api_key=config.openai_key, base_url=config.custom_base_url)


def _build_anthropic(config: AIConfig) -> LLMProvider:
    if not config.anthropic_key:
        raise ConfigurationError("Anthropic API Key not configured")
    return AnthropicProvider(api_key=config.anthropic_key, base_url=config.custom_base_url)


def _build_ollama(config: AIConfig) -> LLMProvider:
    if not config.ollama_host:
        raise ConfigurationError("Ollama host not configured")
    return OllamaProvider(host=config.ollama_host)


_CLIENT_BUILDERS: Dict[str, ClientBuilder] = {
    "gemini": _build_gemini,
    "vertex": _build_vertex,
    "openai": _build_openai,
    "anthropic": _build_anthropic,
    "ollama": _build_ollama,
}


def create_client(provider: str, config: AIConfig) -> LLMProvider:
    """Create the client for *provider* using the credentials in *config*.

    No network call is made here.

    Raises:
        ConfigurationError: unknown provider or missing required setting
    """
    builder = _CLIENT_BUILDERS.get((provider or "").lower())
    if builder is None:
        raise ConfigurationError(
            f"Unknown AI provider: {provider}. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )
    return builder(config)


def resolve_chat_model(provider: str, model: Optional[str]) -> str:
    """Configured model, or the provider's default chat model."""
    if model:
        return model
    info = get_provider_info(provider)
    if info is None:
        raise ConfigurationError(f"Unknown AI provider: {provider}")
    return info.default_chat_model


def create_llm_provider(config: AIConfig) -> Tuple[LLMProvider, str]:
    """Create the chat provider selected in *config*.

    Returns:
        Tuple of (provider instance, model name to use)
    """
    provider = create_client(config.provider, config)
    model = resolve_chat_model(config.provider, config.model)
    logger.debug(f"Chat provider: {config.provider}, model: {model}")
    return provider, model
