"""Tests for grounded question answering."""

import json

from conftest import FakeProvider, RecordingFactory

from memhub.knowledge_base.brain import NOTHING_FOUND_RESPONSE, BrainService, build_prompt, enforce_citations
from memhub.knowledge_base.retrieval import SimilarEvent
from memhub.services.exceptions import GenerationError
from memhub.services.generation_service import GenerationService


class StubRetrieval:
    def __init__(self, events=None, error=None):
        self.events = events or []
        self.error = error
        self.calls = []

    def find_similar_events(self, query, project=None, limit=None):
        self.calls.append({"query": query, "project": project, "limit": limit})
        if self.error:
            raise self.error
        return list(self.events)


def make_event(event_id, text, timestamp="2026-10-01T10:00:00Z", type="note"):
    return SimilarEvent(
        id=event_id,
        timestamp=timestamp,
        type=type,
        text=text,
        project="api",
        source="user",
        similarity=0.9,
    )


EVENTS = [
    make_event("e1", "Refactored JWT validation middleware", type="task_update"),
    make_event("e2", "Idea: rotate signing keys monthly", timestamp="2026-10-03T09:00:00Z", type="idea"),
]


def brain_with(ai_config, completion, events=EVENTS):
    chat = FakeProvider(completion=completion)
    generation = GenerationService(config=ai_config, client_factory=RecordingFactory(chat))
    retrieval = StubRetrieval(events)
    return BrainService(retrieval_service=retrieval, generation_service=generation), chat, retrieval


class TestAskBrain:

    def test_nothing_retrieved_skips_generation(self, ai_config):
        brain, chat, retrieval = brain_with(ai_config, completion="{}", events=[])

        answer = brain.ask_brain("anything")

        assert answer.to_dict() == {"user_response": NOTHING_FOUND_RESPONSE, "related_memories": []}
        assert answer.user_response
        assert answer.degraded is False
        assert chat.complete_calls == []
        assert retrieval.calls[0]["limit"] == 15

    def test_grounded_answer(self, ai_config):
        completion = json.dumps({
            "user_response": "You refactored the JWT middleware.",
            "related_memories": [{
                "id": "e1",
                "excerpt": "JWT validation middleware",
                "date": "2026-10-01T10:00:00Z",
                "type": "task_update",
            }],
        })
        brain, chat, retrieval = brain_with(ai_config, completion)

        answer = brain.ask_brain("what did I do with auth?", project="api")

        assert answer.user_response == "You refactored the JWT middleware."
        assert answer.related_memories == [{
            "id": "e1",
            "excerpt": "JWT validation middleware",
            "date": "2026-10-01T10:00:00Z",
            "type": "task_update",
        }]
        assert retrieval.calls[0]["project"] == "api"
        prompt = chat.complete_calls[0]["prompt"]
        assert "[e1] (2026-10-01T10:00:00Z) [task_update]: Refactored JWT validation middleware" in prompt
        assert 'USER QUESTION: "what did I do with auth?"' in prompt
        assert "GENERAL RULES" in prompt

    def test_fenced_answer_is_accepted(self, ai_config):
        completion = '```json\n{"user_response": "Nothing about that.", "related_memories": []}\n```'
        brain, _, _ = brain_with(ai_config, completion)

        assert brain.ask_brain("q").to_dict() == {"user_response": "Nothing about that.", "related_memories": []}

    def test_unparseable_answer_degrades_to_canned_response(self, ai_config):
        brain, _, _ = brain_with(ai_config, "Sorry, I can't do JSON today.")

        answer = brain.ask_brain("q")

        assert answer.to_dict() == {"user_response": NOTHING_FOUND_RESPONSE, "related_memories": []}
        assert answer.degraded is True
        assert answer.error

    def test_provider_error_degrades(self, ai_config):
        brain, _, _ = brain_with(ai_config, GenerationError("HTTP 500", provider="gemini"))

        answer = brain.ask_brain("q")

        assert answer.user_response == NOTHING_FOUND_RESPONSE
        assert answer.degraded is True

    def test_retrieval_error_degrades(self, ai_config):
        generation = GenerationService(config=ai_config, client_factory=RecordingFactory(FakeProvider()))
        brain = BrainService(
            retrieval_service=StubRetrieval(error=GenerationError("embedding failed")),
            generation_service=generation,
        )

        answer = brain.ask_brain("q")

        assert answer.user_response == NOTHING_FOUND_RESPONSE
        assert answer.degraded is True

    def test_answer_without_user_response_degrades(self, ai_config):
        brain, _, _ = brain_with(ai_config, '{"related_memories": []}')

        assert brain.ask_brain("q").degraded is True


class TestEnforceCitations:

    def test_drops_unretrieved_ids(self):
        cited = enforce_citations([{"id": "e9", "excerpt": "made up"}, {"id": "e2"}], EVENTS)
        assert [c["id"] for c in cited] == ["e2"]

    def test_fills_missing_date_and_type(self):
        cited = enforce_citations([{"id": "e2", "excerpt": "rotate signing keys"}], EVENTS)
        assert cited[0]["date"] == "2026-10-03T09:00:00Z"
        assert cited[0]["type"] == "idea"

    def test_non_verbatim_excerpt_is_replaced(self):
        cited = enforce_citations([{"id": "e1", "excerpt": "Rewrote auth entirely"}], EVENTS)
        assert cited[0]["excerpt"] == "Refactored JWT validation middleware"

    def test_duplicates_and_malformed_entries(self):
        cited = enforce_citations([{"id": "e1"}, "e2", {"id": "e1"}, None], EVENTS)
        assert [c["id"] for c in cited] == ["e1"]

    def test_non_list_gives_empty(self):
        assert enforce_citations({"id": "e1"}, EVENTS) == []


def test_prompt_combines_rules_and_context():
    prompt = build_prompt("q?", EVENTS)
    system, user = prompt.split("\n\nUSER QUESTION:")
    assert "Never invent data" in system
    assert '"related_memories"' in system
    assert "[e2] (2026-10-03T09:00:00Z) [idea]: Idea: rotate signing keys monthly" in user
