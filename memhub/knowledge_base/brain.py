# memhub/knowledge_base/brain.py
"""
Grounded question answering over the user's memories.

The answer is generated only from events returned by semantic recall, and
every cited memory is checked against that retrieved set before it is
returned.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from memhub.config import settings
from memhub.knowledge_base.retrieval.rag_service import RetrievalService, SimilarEvent, get_retrieval_service
from memhub.services.generation_service import GenerationService, get_generation_service

logger = logging.getLogger(__name__)

NOTHING_FOUND_RESPONSE = "I didn't find any information about that in your memories."

BRAIN_SYSTEM_PROMPT = """You are an assistant specialized in interpreting user requests based on memories stored in the system.

GENERAL RULES:
1. Use exclusively the information provided by the retrieval mechanism (RAG).
2. Never invent data, dates, events, or actions that are not present in the retrieved memories.
3. If the information is not available, state clearly: "I did not find this information in your memories."
4. Interpret natural language variations and understand that the user may refer to the same event in different ways.
5. Prioritize precision, clarity, and traceability.

MANDATORY BEHAVIOR:
- Whenever a relevant memory is identified, return:
  a) a natural response for the user
  b) a structured object containing the corresponding memory(ies)

RESPONSE FORMAT:
ALWAYS respond in the following JSON format:

{
  "user_response": "Clear and direct text answering the question.",
  "related_memories": [
    {
      "id": "<memory_id>",
      "excerpt": "<original_text_from_memory>",
      "date": "<iso_timestamp>",
      "type": "<memory_type>"
    }
  ]
}

RULES FOR THE BLOCK 'related_memories':
- Include only memories actually retrieved by the system/context.
- If there are multiple relevant memories, list all of them.
- If no memory is found, return an empty list.
- The "excerpt" must be copied verbatim from the memory text in the context."""

BRAIN_USER_PROMPT = """USER QUESTION: "{query}"

RETRIEVED MEMORIES (Context):
{context}"""


@dataclass
class BrainAnswer:
    """Answer to one question. `degraded` marks the canned fallback after a failure."""
    user_response: str
    related_memories: List[Dict[str, Any]] = field(default_factory=list)
    degraded: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_response": self.user_response,
            "related_memories": list(self.related_memories),
        }


def build_context(events: List[SimilarEvent]) -> str:
    return "\n".join(event.to_context_string() for event in events)


def build_prompt(query: str, events: List[SimilarEvent]) -> str:
    user_prompt = BRAIN_USER_PROMPT.format(query=query, context=build_context(events))
    return f"{BRAIN_SYSTEM_PROMPT}\n\n{user_prompt}"


def _text_or(value: Any, default: Optional[str]) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return default


def enforce_citations(memories: Any, retrieved: List[SimilarEvent]) -> List[Dict[str, Any]]:
    """
    Keep only citations of retrieved events, completed from the stored event.

    - ids outside the retrieved set (or repeated) are dropped
    - a missing date or type is taken from the event
    - an excerpt that does not occur verbatim in the event text is replaced
      by the event text
    """
    if not isinstance(memories, list):
        return []

    by_id = {event.id: event for event in retrieved}
    seen = set()
    cited: List[Dict[str, Any]] = []
    for memory in memories:
        if not isinstance(memory, dict):
            continue
        memory_id = str(memory.get("id") or "").strip()
        event = by_id.get(memory_id)
        if event is None:
            logger.warning(f"Dropping citation of unretrieved memory: {memory_id!r}")
            continue
        if memory_id in seen:
            continue
        seen.add(memory_id)

        event_text = event.text or ""
        excerpt = memory.get("excerpt")
        if not isinstance(excerpt, str) or not excerpt.strip() or excerpt.strip() not in event_text:
            excerpt = event_text

        cited.append({
            "id": memory_id,
            "excerpt": excerpt,
            "date": _text_or(memory.get("date"), event.timestamp),
            "type": _text_or(memory.get("type"), event.type),
        })
    return cited


class BrainService:
    """
    Answers questions from retrieved memories.

    Callers always get a BrainAnswer: an empty recall or any failure yields
    the canned "nothing found" response.
    """

    def __init__(
        self,
        retrieval_service: Optional[RetrievalService] = None,
        generation_service: Optional[GenerationService] = None,
        top_k: Optional[int] = None,
    ):
        self._retrieval = retrieval_service
        self._generation = generation_service
        self.top_k = top_k or settings.BRAIN_TOP_K

    @property
    def retrieval(self) -> RetrievalService:
        return self._retrieval or get_retrieval_service()

    @property
    def generation(self) -> GenerationService:
        return self._generation or get_generation_service()

    def _fallback(self, error: Exception) -> BrainAnswer:
        return BrainAnswer(user_response=NOTHING_FOUND_RESPONSE, degraded=True, error=str(error))

    def ask_brain(self, query: str, project: Optional[str] = None) -> BrainAnswer:
        """
        Answer *query* from the memories most similar to it.

        Args:
            query: The user's question
            project: Only recall memories of this project

        Returns:
            BrainAnswer with the response text and the cited memories
        """
        try:
            events = self.retrieval.find_similar_events(query, project=project, limit=self.top_k)
        except Exception as e:
            logger.error(f"AskBrain retrieval error: {e}")
            return self._fallback(e)

        if not events:
            logger.info("AskBrain: no memories retrieved, skipping generation")
            return BrainAnswer(user_response=NOTHING_FOUND_RESPONSE)

        try:
            result = self.generation.generate_json_result(build_prompt(query, events))
        except Exception as e:
            logger.error(f"AskBrain RAG Error: {e}")
            return self._fallback(e)

        if not result.ok:
            logger.error(f"AskBrain RAG Error: {result.error}")
            return self._fallback(RuntimeError(result.error))

        value = result.value
        if not isinstance(value, dict) or not isinstance(value.get("user_response"), str):
            logger.error(f"AskBrain RAG Error: unexpected answer shape: {str(value)[:200]!r}")
            return self._fallback(ValueError("Answer is missing 'user_response'"))

        memories = enforce_citations(value.get("related_memories"), events)
        logger.info(f"AskBrain answered from {len(events)} memories, {len(memories)} cited")
        return BrainAnswer(user_response=value["user_response"], related_memories=memories)


# Singleton instance
_brain_service: Optional[BrainService] = None


def get_brain_service() -> BrainService:
    """Get or create the singleton brain service."""
    global _brain_service
    if _brain_service is None:
        _brain_service = BrainService()
    return _brain_service


def ask_brain(query: str, project: Optional[str] = None) -> Dict[str, Any]:
    return get_brain_service().ask_brain(query, project=project).to_dict()
