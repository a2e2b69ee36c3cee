# memhub/routers/brain.py
"""
Brain API routes: question answering, similarity search, embedding backfill
and insights.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from memhub.dependencies import get_brain, get_embeddings, get_insights, get_retrieval
from memhub.knowledge_base.brain import BrainService
from memhub.knowledge_base.embedding import EmbeddingService
from memhub.knowledge_base.insights import InsightsService
from memhub.knowledge_base.retrieval import RetrievalService
from memhub.schemas.BrainRequest import AskRequest, ConnectionsRequest, SummaryRequest
from memhub.schemas.BrainResponse import AskResponse, SimilarEventResponse
from memhub.services.exceptions import ConfigurationError, GenerationError
from memhub.services.llm_providers import PROVIDER_CATALOG

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/brain", tags=["brain"])


def _provider_http_error(e: Exception) -> HTTPException:
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


@router.post("/ask", response_model=AskResponse)
def ask(req: AskRequest, brain: BrainService = Depends(get_brain)):
    """Answer a question from the user's memories. Failures degrade to the canned answer."""
    answer = brain.ask_brain(req.query, project=req.project)
    return answer.to_dict()


@router.get("/similar", response_model=List[SimilarEventResponse])
def similar(
    query: str = Query(..., min_length=1),
    project: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    retrieval: RetrievalService = Depends(get_retrieval),
):
    try:
        results = retrieval.find_similar_events(query, project=project, limit=limit)
    except (ConfigurationError, GenerationError) as e:
        logger.error(f"Similarity search failed: {e}")
        raise _provider_http_error(e)
    return [result.to_dict() for result in results]


@router.post("/backfill", status_code=202)
def backfill(embeddings: EmbeddingService = Depends(get_embeddings)):
    """Start embedding every event that has none. Returns immediately."""
    embeddings.start_backfill()
    return {"status": "started"}


@router.get("/providers")
def providers():
    return [info.to_dict() for info in PROVIDER_CATALOG.values()]


@router.post("/connections")
def connections(req: ConnectionsRequest, insights: InsightsService = Depends(get_insights)):
    try:
        return {"connections": insights.generate_connections(project=req.project)}
    except (ConfigurationError, GenerationError) as e:
        logger.error(f"Connection analysis failed: {e}")
        raise _provider_http_error(e)


@router.post("/summary")
def summary(req: SummaryRequest, insights: InsightsService = Depends(get_insights)):
    try:
        event = insights.generate_daily_summary(req.project)
    except (ConfigurationError, GenerationError) as e:
        logger.error(f"Daily summary failed: {e}")
        raise _provider_http_error(e)
    return {"summary": event}
