# memhub/models/project.py
"""
SQLAlchemy model for registered projects.

Projects are registered by the host application; the retrieval layer only
reads them to filter events by project name.
"""

from datetime import datetime

from sqlalchemy import Column, String, Text, DateTime, Index
from sqlalchemy.orm import relationship

from memhub.db.base import Base
from memhub.config import settings as app_settings


class Project(Base):
    """A tracked project directory whose activity is logged as events."""
    __tablename__ = "projects"
    __table_args__ = (
        Index("idx_projects_name", "name"),
        {"schema": app_settings.DATABASE_SCHEMA}
    )

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    path = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    events = relationship("Event", back_populates="project", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Project({self.name}, path={self.path})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
