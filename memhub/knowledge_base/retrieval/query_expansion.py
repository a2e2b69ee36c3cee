# memhub/knowledge_base/retrieval/query_expansion.py
"""
Query expansion for recall.

A short question is rewritten into phrasings that look like entries in the
activity log (headline, detailed technical note, past-tense statement), so
that each one can be embedded and matched against stored events.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from memhub.services.generation_service import GenerationService, get_generation_service

logger = logging.getLogger(__name__)

QUERY_EXPANSION_PROMPT = """You are a search optimizer for a developer's technical memory log.
The log contains short notes, task updates, ideas and daily summaries written while working on software projects.

Rewrite the user's question as entries that could appear in that log.
Generate 3 distinct variations:
1. Concise headline style.
2. Detailed, descriptive technical entry.
3. Past-tense declarative statement.

USER QUESTION: "{query}"

Output ONLY the 3 lines, separated by plain newlines. Do not use bullets or numbering."""


@dataclass
class QueryExpansion:
    """Search phrasings for one query. `degraded` means the raw query was used as-is."""
    query: str
    variations: List[str] = field(default_factory=list)
    degraded: bool = False
    reason: Optional[str] = None


class QueryExpander:
    """Turns a user query into log-style search phrasings via the chat provider."""

    def __init__(self, generation_service: Optional[GenerationService] = None):
        self._generation = generation_service

    @property
    def generation(self) -> GenerationService:
        return self._generation or get_generation_service()

    def expand(self, query: str) -> QueryExpansion:
        """
        Expand *query* into search variations. Never raises.

        Each non-empty line of the completion (trimmed) is one variation.
        Any failure, or a completion with no usable line, falls back to the
        raw query alone.
        """
        try:
            text = self.generation.generate_text(QUERY_EXPANSION_PROMPT.format(query=query))
        except Exception as e:
            logger.warning(f"Query expansion failed, searching raw query: {e}")
            return QueryExpansion(query=query, variations=[query], degraded=True, reason=str(e))

        variations = [line.strip() for line in (text or "").split("\n") if line.strip()]
        if not variations:
            logger.warning("Query expansion returned no lines, searching raw query")
            return QueryExpansion(query=query, variations=[query], degraded=True, reason="empty expansion")

        logger.debug(f"Expanded query into {len(variations)} variations: {variations}")
        return QueryExpansion(query=query, variations=variations)
