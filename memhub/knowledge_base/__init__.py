# memhub/knowledge_base/__init__.py
"""
Knowledge base module for recall over the event log.

This module provides:
- Embedding generation and storage for events
- Query expansion and best-of cosine ranking
- Grounded question answering over retrieved memories
- Connections and daily summaries

Usage:
    # Embed every event that has no vector yet
    from memhub.knowledge_base.embedding import get_embedding_service
    stats = get_embedding_service().backfill_embeddings()

    # Query the memories
    from memhub.knowledge_base.brain import get_brain_service
    answer = get_brain_service().ask_brain("what did I change in auth?")

    # CLI usage
    python -m memhub.cli backfill
    python -m memhub.cli search "auth middleware"
    python -m memhub.cli ask "what did I change in auth?"
"""

from memhub.knowledge_base.embedding.embedding_service import (
    BackfillStats,
    EmbeddingResult,
    EmbeddingService,
    get_embedding_service,
)
from memhub.knowledge_base.retrieval.rag_service import RetrievalService, SimilarEvent, get_retrieval_service
from memhub.knowledge_base.retrieval.query_expansion import QueryExpander, QueryExpansion
from memhub.knowledge_base.brain import BrainAnswer, BrainService, get_brain_service
from memhub.knowledge_base.insights import InsightsService, get_insights_service

__all__ = [
    # Embedding
    "BackfillStats",
    "EmbeddingResult",
    "EmbeddingService",
    "get_embedding_service",
    # Retrieval
    "QueryExpander",
    "QueryExpansion",
    "RetrievalService",
    "SimilarEvent",
    "get_retrieval_service",
    # Question answering
    "BrainAnswer",
    "BrainService",
    "get_brain_service",
    # Insights
    "InsightsService",
    "get_insights_service",
]
