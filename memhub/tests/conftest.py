"""Shared fixtures: an in-memory database and scripted provider fakes."""

from typing import Callable, Dict, List, Optional, Sequence

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from memhub.db.base import Base
from memhub.models import Event, EventEmbedding, Project
from memhub.services.config_service import AIConfig


class FakeProvider:
    """Scripted LLMProvider that records every call."""

    def __init__(
        self,
        name: str = "gemini",
        completion=None,
        embedder: Optional[Callable[[str], Sequence[float]]] = None,
        native_json: bool = True,
        supports_embeddings: bool = True,
    ):
        self._name = name
        self._completion = completion if completion is not None else ""
        self._embedder = embedder or (lambda text: [1.0, 0.0])
        self._native_json = native_json
        self._supports_embeddings = supports_embeddings
        self.complete_calls: List[Dict] = []
        self.embed_calls: List[Dict] = []

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def supports_embeddings(self) -> bool:
        return self._supports_embeddings

    @property
    def supports_native_json(self) -> bool:
        return self._native_json

    def complete(self, model, prompt, system_instruction=None, json_mode=False):
        self.complete_calls.append({
            "model": model,
            "prompt": prompt,
            "system_instruction": system_instruction,
            "json_mode": json_mode,
        })
        if isinstance(self._completion, Exception):
            raise self._completion
        if callable(self._completion):
            return self._completion(prompt)
        return self._completion

    def embed(self, model, text):
        self.embed_calls.append({"model": model, "text": text})
        return self._embedder(text)

    def is_available(self) -> bool:
        return True


class RecordingFactory:
    """client_factory stand-in that hands out one provider and records the requested names."""

    def __init__(self, provider: FakeProvider):
        self.provider = provider
        self.requested: List[str] = []

    def __call__(self, provider_name: str, config: AIConfig) -> FakeProvider:
        self.requested.append(provider_name)
        return self.provider


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def ai_config():
    return AIConfig(
        provider="gemini",
        model="gemini-test",
        embedding_provider="gemini",
        embedding_model="embed-test",
        gemini_key="test-key",
    )


@pytest.fixture
def seed_event(session_factory):
    """Insert an event (and optionally its embedding and project)."""

    def _seed(
        event_id: str,
        text: Optional[str],
        vector: Optional[Sequence[float]] = None,
        type: Optional[str] = "note",
        source: Optional[str] = "user",
        project: Optional[str] = None,
        timestamp: str = "2026-10-01T10:00:00Z",
        model: str = "embed-test",
    ) -> None:
        db = session_factory()
        try:
            project_id = None
            if project is not None:
                row = db.query(Project).filter(Project.name == project).first()
                if row is None:
                    row = Project(id=f"proj-{project}", name=project, path=f"/work/{project}")
                    db.add(row)
                    db.flush()
                project_id = row.id

            db.add(Event(
                id=event_id,
                timestamp=timestamp,
                type=type,
                text=text,
                project_id=project_id,
                source=source,
            ))
            db.flush()
            if vector is not None:
                db.add(EventEmbedding(event_id=event_id, vector=list(vector), model=model))
            db.commit()
        finally:
            db.close()

    return _seed
