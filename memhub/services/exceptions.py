# memhub/services/exceptions.py
"""Error taxonomy for provider access, generation and embeddings."""

from typing import Optional


class MemhubError(Exception):
    pass


class ConfigurationError(MemhubError):
    """A required provider setting or credential is missing. Fatal, never retried."""
    pass


class GenerationError(MemhubError):
    """
    Provider call failed or produced an unusable response.

    Attributes:
        provider: Provider that produced the error
        raw_text: Raw completion text, when there was one (e.g. unparseable JSON)
    """

    def __init__(self, message: str, provider: Optional[str] = None, raw_text: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.raw_text = raw_text

    def __str__(self) -> str:
        if self.provider:
            return f"{self.message} (provider: {self.provider})"
        return self.message


class TransientProviderError(GenerationError):
    """Timeout, connection failure or rate limit. Skipped over by backfill."""
    pass


class EmbeddingError(GenerationError):
    pass
