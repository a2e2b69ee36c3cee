"""Tests for the brain HTTP routes."""

from concurrent.futures import Future

import pytest
from fastapi.testclient import TestClient

from memhub.dependencies import get_brain, get_embeddings, get_insights, get_retrieval
from memhub.knowledge_base.brain import BrainAnswer
from memhub.knowledge_base.embedding import BackfillStats
from memhub.knowledge_base.retrieval import SimilarEvent
from memhub.main import app
from memhub.services.exceptions import ConfigurationError, TransientProviderError


class StubBrain:
    def ask_brain(self, query, project=None):
        return BrainAnswer(
            user_response=f"answer to {query}",
            related_memories=[{"id": "e1", "excerpt": "text", "date": "2026-10-01T10:00:00Z", "type": "note"}],
        )


class StubRetrieval:
    def __init__(self, error=None):
        self.error = error

    def find_similar_events(self, query, project=None, limit=None):
        if self.error:
            raise self.error
        return [SimilarEvent(id="e1", timestamp="2026-10-01T10:00:00Z", type="note", text="text",
                             project=project, source="user", similarity=0.75)]


class StubEmbeddings:
    def __init__(self):
        self.started = 0

    def start_backfill(self):
        self.started += 1
        future = Future()
        future.set_result(BackfillStats())
        return future


class StubInsights:
    def generate_connections(self, project=None):
        return [{"source": "e1", "target": "e2", "reason": "same topic"}]

    def generate_daily_summary(self, project, now=None):
        raise ConfigurationError("Gemini API Key not configured")


@pytest.fixture
def embeddings():
    return StubEmbeddings()


@pytest.fixture
def client(embeddings):
    app.dependency_overrides[get_brain] = StubBrain
    app.dependency_overrides[get_retrieval] = lambda: StubRetrieval()
    app.dependency_overrides[get_embeddings] = lambda: embeddings
    app.dependency_overrides[get_insights] = StubInsights
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_ask(client):
    response = client.post("/api/brain/ask", json={"query": "auth?", "project": "api"})

    assert response.status_code == 200
    body = response.json()
    assert body["user_response"] == "answer to auth?"
    assert body["related_memories"][0]["id"] == "e1"


def test_ask_requires_query(client):
    assert client.post("/api/brain/ask", json={"query": ""}).status_code == 422


def test_similar(client):
    response = client.get("/api/brain/similar", params={"query": "auth", "project": "api", "limit": 3})

    assert response.status_code == 200
    assert response.json() == [{
        "id": "e1",
        "timestamp": "2026-10-01T10:00:00Z",
        "type": "note",
        "text": "text",
        "project": "api",
        "source": "user",
        "similarity": 0.75,
    }]


def test_similar_provider_failure_is_bad_gateway(client):
    app.dependency_overrides[get_retrieval] = lambda: StubRetrieval(
        error=TransientProviderError("HTTP 503", provider="gemini")
    )

    assert client.get("/api/brain/similar", params={"query": "auth"}).status_code == 502


def test_backfill_starts_job(client, embeddings):
    response = client.post("/api/brain/backfill")

    assert response.status_code == 202
    assert response.json() == {"status": "started"}
    assert embeddings.started == 1


def test_providers(client):
    providers = {p["id"]: p for p in client.get("/api/brain/providers").json()}

    assert set(providers) == {"gemini", "vertex", "openai", "anthropic", "ollama"}
    assert providers["anthropic"]["supports_embeddings"] is False


def test_connections(client):
    response = client.post("/api/brain/connections", json={})

    assert response.json() == {"connections": [{"source": "e1", "target": "e2", "reason": "same topic"}]}


def test_summary_configuration_error(client):
    response = client.post("/api/brain/summary", json={"project": "api"})

    assert response.status_code == 400
    assert "not configured" in response.json()["detail"]
