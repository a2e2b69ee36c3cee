# memhub/knowledge_base/retrieval/__init__.py
"""Semantic recall over stored event embeddings."""

from memhub.knowledge_base.retrieval.query_expansion import QueryExpander, QueryExpansion
from memhub.knowledge_base.retrieval.rag_service import (
    RetrievalService,
    SimilarEvent,
    find_similar_events,
    get_retrieval_service,
)
from memhub.knowledge_base.retrieval.similarity import best_similarity, cosine_similarity

__all__ = [
    "QueryExpander",
    "QueryExpansion",
    "RetrievalService",
    "SimilarEvent",
    "find_similar_events",
    "get_retrieval_service",
    "best_similarity",
    "cosine_similarity",
]
