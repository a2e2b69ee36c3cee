# memhub/models/__init__.py
# Database models for memhub

from memhub.db.base import Base

# Settings models
from memhub.models.settings import AppSetting

# Project / event models
from memhub.models.project import Project
from memhub.models.event import Event, EventEmbedding

__all__ = [
    "Base",
    "AppSetting",
    "Project",
    "Event",
    "EventEmbedding",
]
