# memhub/dependencies.py
"""
Shared dependencies for FastAPI routes.

Each returns the process-wide service; tests swap them through
app.dependency_overrides.
"""

from memhub.knowledge_base.brain import BrainService, get_brain_service
from memhub.knowledge_base.embedding import EmbeddingService, get_embedding_service
from memhub.knowledge_base.insights import InsightsService, get_insights_service
from memhub.knowledge_base.retrieval import RetrievalService, get_retrieval_service


def get_brain() -> BrainService:
    """Dependency to get the brain service."""
    return get_brain_service()


def get_retrieval() -> RetrievalService:
    """Dependency to get the retrieval service."""
    return get_retrieval_service()


def get_embeddings() -> EmbeddingService:
    """Dependency to get the embedding service."""
    return get_embedding_service()


def get_insights() -> InsightsService:
    """Dependency to get the insights service."""
    return get_insights_service()
