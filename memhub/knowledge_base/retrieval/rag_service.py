# memhub/knowledge_base/retrieval/rag_service.py
"""
Retrieval service for semantic recall over logged events.

Provides:
- Candidate selection (stored embeddings joined with their events)
- Query expansion and concurrent embedding of the variations
- Best-of cosine scoring and ranking in process
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy import or_

from memhub.config import settings
from memhub.db.session import get_db_session
from memhub.knowledge_base.embedding.embedding_service import EmbeddingService, get_embedding_service
from memhub.knowledge_base.retrieval.query_expansion import QueryExpander
from memhub.knowledge_base.retrieval.similarity import best_similarity
from memhub.models.event import Event, EventEmbedding, RECALL_EXCLUDED_SOURCES, RECALL_EXCLUDED_TYPES
from memhub.models.project import Project

logger = logging.getLogger(__name__)


@dataclass
class SimilarEvent:
    """A single ranked event. The stored vector is never part of the result."""

    id: str
    timestamp: Optional[str]
    type: Optional[str]
    text: Optional[str]
    project: Optional[str]
    source: Optional[str]
    similarity: float

    def to_context_string(self) -> str:
        """One context line for LLM prompts."""
        return f"[{self.id}] ({self.timestamp}) [{self.type}]: {self.text}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'timestamp': self.timestamp,
            'type': self.type,
            'text': self.text,
            'project': self.project,
            'source': self.source,
            'similarity': self.similarity,
        }


@dataclass
class _Candidate:
    id: str
    timestamp: Optional[str]
    type: Optional[str]
    text: Optional[str]
    project: Optional[str]
    source: Optional[str]
    vector: List[float]


class RetrievalService:
    """
    Service for ranking stored events against a free-text query.

    Embeddings are scored in process, so vectors from different models can
    share the table; a candidate is only compared with query vectors of the
    same dimension.
    """

    def __init__(
        self,
        embedding_service: Optional[EmbeddingService] = None,
        query_expander: Optional[QueryExpander] = None,
        session_factory=None,
    ):
        self._embedding_service = embedding_service
        self._query_expander = query_expander
        self._session_factory = session_factory
        self.default_limit = settings.SIMILAR_EVENTS_DEFAULT_LIMIT

    @property
    def embedding_service(self) -> EmbeddingService:
        return self._embedding_service or get_embedding_service()

    @property
    def query_expander(self) -> QueryExpander:
        if self._query_expander is None:
            self._query_expander = QueryExpander()
        return self._query_expander

    def fetch_candidates(self, project: Optional[str] = None) -> List[_Candidate]:
        """Every stored embedding with its event, minus commit imports."""
        with get_db_session(self._session_factory) as db:
            query = (
                db.query(
                    Event.id,
                    Event.timestamp,
                    Event.type,
                    Event.text,
                    Event.source,
                    Project.name.label("project_name"),
                    EventEmbedding.vector,
                )
                .join(EventEmbedding, EventEmbedding.event_id == Event.id)
                .outerjoin(Project, Project.id == Event.project_id)
                .filter(or_(Event.type.is_(None), Event.type.notin_(RECALL_EXCLUDED_TYPES)))
                .filter(or_(Event.source.is_(None), Event.source.notin_(RECALL_EXCLUDED_SOURCES)))
            )
            if project:
                query = query.filter(Project.name == project)

            rows = query.order_by(Event.timestamp.desc(), Event.id).all()
            return [
                _Candidate(
                    id=row.id,
                    timestamp=row.timestamp,
                    type=row.type,
                    text=row.text,
                    project=row.project_name,
                    source=row.source,
                    vector=list(row.vector or []),
                )
                for row in rows
            ]

    def embed_variations(self, variations: List[str]) -> List[List[float]]:
        """Embed all variations concurrently. The first provider error propagates."""
        if len(variations) == 1:
            return [self.embedding_service.generate_embedding(variations[0])]

        with ThreadPoolExecutor(max_workers=len(variations), thread_name_prefix="embed-query") as pool:
            return list(pool.map(self.embedding_service.generate_embedding, variations))

    def find_similar_events(
        self,
        query: str,
        project: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[SimilarEvent]:
        """
        Rank stored events by semantic similarity to *query*.

        Args:
            query: Natural language query
            project: Only consider events of the project with this name
            limit: Number of results to return

        Returns:
            List of SimilarEvent sorted by similarity (highest first); empty
            when nothing is stored, without any provider call

        Raises:
            ConfigurationError / GenerationError: embedding a query variation failed
            ValueError: limit is less than 1
        """
        limit = self.default_limit if limit is None else limit
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        candidates = self.fetch_candidates(project)
        if not candidates:
            logger.info(f"No stored embeddings to search (project={project})")
            return []

        expansion = self.query_expander.expand(query)
        query_vectors = self.embed_variations(expansion.variations)

        scored: List[SimilarEvent] = []
        mismatched = 0
        for candidate in candidates:
            score = best_similarity(query_vectors, candidate.vector)
            if score is None:
                mismatched += 1
                logger.debug(f"Skipping event {candidate.id}: embedding dimension {len(candidate.vector)} "
                             f"does not match any query vector")
                continue
            scored.append(SimilarEvent(
                id=candidate.id,
                timestamp=candidate.timestamp,
                type=candidate.type,
                text=candidate.text,
                project=candidate.project,
                source=candidate.source,
                similarity=score,
            ))

        if mismatched:
            logger.warning(f"Excluded {mismatched} events embedded with a different model dimension")

        scored.sort(key=lambda result: result.similarity, reverse=True)
        results = scored[:limit]
        logger.info(f"Found {len(results)} similar events for query (candidates={len(candidates)}, "
                    f"variations={len(expansion.variations)}, degraded={expansion.degraded})")
        return results

    def retrieve_for_context(self, query: str, project: Optional[str] = None, top_k: Optional[int] = None) -> str:
        """Retrieve and format events as prompt context, one line per event."""
        results = self.find_similar_events(query, project=project, limit=top_k)
        return "\n".join(result.to_context_string() for result in results)


# Singleton instance
_retrieval_service: Optional[RetrievalService] = None


def get_retrieval_service() -> RetrievalService:
    """Get or create the singleton retrieval service."""
    global _retrieval_service
    if _retrieval_service is None:
        _retrieval_service = RetrievalService()
    return _retrieval_service


def find_similar_events(query: str, project: Optional[str] = None, limit: Optional[int] = None) -> List[SimilarEvent]:
    return get_retrieval_service().find_similar_events(query, project=project, limit=limit)
