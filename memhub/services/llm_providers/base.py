"""LLM Provider Protocol - defines the capability set every provider client exposes."""
from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class LLMProvider(Protocol):
    """Protocol defining the interface for LLM providers.

    All providers must implement:
    - provider_name: Identifier for the provider
    - supports_embeddings / supports_native_json: capability flags
    - complete(): Single-turn text completion
    - embed(): Embedding for one text
    - is_available(): Check provider availability
    """

    @property
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'gemini', 'openai')."""
        ...

    @property
    def supports_embeddings(self) -> bool:
        """Whether embed() is backed by a real embedding endpoint."""
        ...

    @property
    def supports_native_json(self) -> bool:
        """Whether the provider can be asked to emit JSON only (structured output mode)."""
        ...

    def complete(
        self,
        model: str,
        prompt: str,
        system_instruction: Optional[str] = None,
        json_mode: bool = False,
    ) -> str:
        """Send a single-turn completion request.

        Args:
            model: The model identifier
            prompt: User prompt
            system_instruction: Optional system instruction
            json_mode: Enable native JSON output (ignored when unsupported)

        Returns:
            First text segment of the response, or "" when there is none
        """
        ...

    def embed(self, model: str, text: str) -> Any:
        """Generate an embedding for *text*.

        Returns:
            The provider's embedding payload (a list of floats or a
            provider-specific wrapper such as {"values": [...]})
        """
        ...

    def is_available(self) -> bool:
        """Check if the provider is available and configured."""
        ...
