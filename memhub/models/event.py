# memhub/models/event.py
"""
SQLAlchemy models for logged events and their embeddings.

Events are written by the ingestion side (notes, AI summaries, git commits)
and are read-only here. EventEmbedding holds at most one vector per event.
"""

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, JSON
from sqlalchemy.orm import relationship

from memhub.db.base import Base, qualified
from memhub.config import settings as app_settings


# Known categories and origins. Stored as plain strings so the ingestion side
# can add categories without a migration.
EVENT_TYPES = ("note", "idea", "task_update", "summary", "git_commit")
EVENT_SOURCES = ("user", "ai", "git", "scheduler")

# Commit imports are noise for semantic recall
RECALL_EXCLUDED_TYPES = ("git_commit",)
RECALL_EXCLUDED_SOURCES = ("git",)


class Event(Base):
    """A single logged activity entry."""
    __tablename__ = "events"
    __table_args__ = (
        Index("idx_events_project_id", "project_id"),
        Index("idx_events_timestamp", "timestamp"),
        Index("idx_events_type", "type"),
        {"schema": app_settings.DATABASE_SCHEMA}
    )

    id = Column(String(64), primary_key=True)
    timestamp = Column(String(64), nullable=True)  # ISO-8601
    type = Column(String(50), nullable=True)
    text = Column(Text, nullable=True)
    project_id = Column(
        String(64),
        ForeignKey(f"{qualified('projects')}.id", ondelete="CASCADE"),
        nullable=True
    )
    source = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="events")
    embedding = relationship(
        "EventEmbedding",
        back_populates="event",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Event({self.id}, type={self.type}, source={self.source})>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "type": self.type,
            "text": self.text,
            "project": self.project.name if self.project else None,
            "source": self.source,
        }


class EventEmbedding(Base):
    """
    Embedding vector for one event, keyed by event id.

    The vector is stored as a JSON list so different embedding models
    (and dimensions) can coexist; `model` records which one produced it.
    """
    __tablename__ = "event_embeddings"
    __table_args__ = (
        Index("idx_event_embeddings_model", "model"),
        {"schema": app_settings.DATABASE_SCHEMA}
    )

    event_id = Column(
        String(64),
        ForeignKey(f"{qualified('events')}.id", ondelete="CASCADE"),
        primary_key=True
    )
    vector = Column(JSON, nullable=False)
    model = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    event = relationship("Event", back_populates="embedding")

    def __repr__(self) -> str:
        dims = len(self.vector) if self.vector else 0
        return f"<EventEmbedding(event_id={self.event_id}, model={self.model}, dims={dims})>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "model": self.model,
            "dimensions": len(self.vector) if self.vector else 0,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
