# memhub/knowledge_base/embedding/__init__.py
"""Embedding generation and storage for events."""

from memhub.knowledge_base.embedding.embedding_service import (
    BackfillStats,
    EmbeddingResult,
    EmbeddingService,
    get_embedding_service,
    normalize_vector,
    resolve_embedding_target,
)

__all__ = [
    "BackfillStats",
    "EmbeddingResult",
    "EmbeddingService",
    "get_embedding_service",
    "normalize_vector",
    "resolve_embedding_target",
]
