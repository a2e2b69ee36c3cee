# memhub/models/settings.py
"""
SQLAlchemy model for the key-value application settings store.

Provider selection, model ids and API credentials live here and are edited
by the settings UI of the host application.
"""

from datetime import datetime

from sqlalchemy import Column, String, Text, DateTime, Index

from memhub.db.base import Base
from memhub.config import settings as app_settings


# Keys whose values must never be echoed back in full
SECRET_KEYS = ("gemini_key", "openai_key", "anthropic_key")


class AppSetting(Base):
    """
    Application settings table.

    One row per key; `category` groups keys for the settings UI
    (e.g., 'ai', 'embedding', 'credentials').
    """
    __tablename__ = "settings"
    __table_args__ = (
        Index("idx_settings_category", "category"),
        {"schema": app_settings.DATABASE_SCHEMA}
    )

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<AppSetting({self.key}={self.masked_value()})>"

    def masked_value(self) -> str:
        """Value safe for logs: secrets are reduced to their last four characters."""
        if self.value and self.key in SECRET_KEYS:
            return f"***{self.value[-4:]}"
        return self.value or ""

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "value": self.masked_value(),
            "category": self.category,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
