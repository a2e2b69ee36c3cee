# memhub/services/config_service.py
"""
Service layer for provider configuration: key-value settings with fallback defaults,
and the immutable AIConfig snapshot handed to the generation/embedding services.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import logging

from sqlalchemy.orm import sessionmaker

from memhub.config import settings
from memhub.db.session import get_db_session
from memhub.models.settings import AppSetting

logger = logging.getLogger(__name__)


# Default values (fallback when DB unavailable or setting not found)
DEFAULT_SETTINGS: Dict[str, Any] = {
    "ai_provider": "gemini",
    "embedding_provider": "gemini",
    "vertex_location": "us-central1",
}

SETTING_CATEGORIES: Dict[str, str] = {
    "ai_provider": "ai",
    "ai_model": "ai",
    "ai_custom_base_url": "ai",
    "embedding_provider": "embedding",
    "embedding_model": "embedding",
    "gemini_key": "credentials",
    "openai_key": "credentials",
    "anthropic_key": "credentials",
    "vertex_project_id": "credentials",
    "vertex_location": "credentials",
    "ollama_host": "ai",
}


@dataclass(frozen=True)
class AIConfig:
    """
    Snapshot of everything needed to pick and build a provider client.

    Built from the settings store (see ConfigService.load_ai_config) or
    directly in tests with fixture values.
    """
    provider: str = "gemini"
    model: Optional[str] = None
    embedding_provider: str = "gemini"
    embedding_model: Optional[str] = None
    gemini_key: Optional[str] = None
    openai_key: Optional[str] = None
    anthropic_key: Optional[str] = None
    vertex_project_id: Optional[str] = None
    vertex_location: str = "us-central1"
    custom_base_url: Optional[str] = None
    ollama_host: Optional[str] = None

    @classmethod
    def from_lookup(cls, get: Callable[[str], Optional[str]]) -> "AIConfig":
        """Build a config from a `getSetting(key)`-style lookup."""
        def value(key: str, default: Optional[str] = None) -> Optional[str]:
            raw = get(key)
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                return default
            return str(raw).strip()

        return cls(
            provider=(value("ai_provider", "gemini") or "gemini").lower(),
            model=value("ai_model"),
            embedding_provider=(value("embedding_provider", "gemini") or "gemini").lower(),
            embedding_model=value("embedding_model"),
            gemini_key=value("gemini_key"),
            openai_key=value("openai_key"),
            anthropic_key=value("anthropic_key"),
            vertex_project_id=value("vertex_project_id"),
            vertex_location=value("vertex_location", "us-central1") or "us-central1",
            custom_base_url=value("ai_custom_base_url"),
            ollama_host=value("ollama_host", settings.OLLAMA_HOST),
        )


class ConfigService:
    """
    Service for reading and writing provider settings.

    Usage:
        service = ConfigService()
        provider = service.get("ai_provider")
        config = service.load_ai_config()
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        """
        Initialize ConfigService.

        Args:
            session_factory: Optional session factory. Defaults to the application's SessionLocal.
        """
        self._session_factory = session_factory

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value.

        Args:
            key: Setting key (e.g., 'ai_provider', 'openai_key')
            default: Default value if not found (overrides DEFAULT_SETTINGS)

        Returns:
            The stored value, or the default if not found / DB unavailable
        """
        fallback = default if default is not None else DEFAULT_SETTINGS.get(key)

        if not settings.USE_DB_SETTINGS:
            return fallback

        try:
            with get_db_session(self._session_factory) as db:
                setting = db.get(AppSetting, key)
                if setting is not None and setting.value is not None:
                    return setting.value
        except Exception as e:
            logger.warning(f"Failed to get setting {key} from DB: {e}")

        return fallback

    def set(self, key: str, value: Any, category: Optional[str] = None) -> None:
        """
        Insert or update a setting.

        Args:
            key: Setting key
            value: Value to store (stored as text)
            category: Optional category; inferred from the key when omitted
        """
        with get_db_session(self._session_factory) as db:
            existing = db.get(AppSetting, key)
            stored = None if value is None else str(value)
            if existing:
                existing.value = stored
                existing.updated_at = datetime.utcnow()
                if category:
                    existing.category = category
            else:
                db.add(AppSetting(
                    key=key,
                    value=stored,
                    category=category or SETTING_CATEGORIES.get(key, "general"),
                ))
        logger.info(f"Setting '{key}' updated")

    def delete(self, key: str) -> bool:
        """
        Remove a setting.

        Returns:
            True if the setting existed
        """
        with get_db_session(self._session_factory) as db:
            setting = db.get(AppSetting, key)
            if not setting:
                return False
            db.delete(setting)
            return True

    def list_all(self) -> List[Dict[str, Any]]:
        """List all stored settings with secrets masked."""
        with get_db_session(self._session_factory) as db:
            rows = db.query(AppSetting).order_by(AppSetting.category, AppSetting.key).all()
            return [row.to_dict() for row in rows]

    def get_all(self) -> Dict[str, Any]:
        """
        All settings in one read, layered over DEFAULT_SETTINGS.

        Returns:
            Dictionary of key -> value
        """
        values = dict(DEFAULT_SETTINGS)

        if not settings.USE_DB_SETTINGS:
            return values

        try:
            with get_db_session(self._session_factory) as db:
                for row in db.query(AppSetting).all():
                    if row.value is not None:
                        values[row.key] = row.value
        except Exception as e:
            logger.warning(f"Failed to load settings from DB: {e}")

        return values

    def load_ai_config(self) -> AIConfig:
        """Read the current provider settings into an AIConfig snapshot."""
        return AIConfig.from_lookup(self.get_all().get)


# Singleton instance for convenience
_config_service: Optional[ConfigService] = None


def get_config_service() -> ConfigService:
    """Get the singleton ConfigService instance."""
    global _config_service
    if _config_service is None:
        _config_service = ConfigService()
    return _config_service


# Convenience function for quick access
def get_setting(key: str, default: Any = None) -> Any:
    """
    Quick access to get a setting value.

    Args:
        key: Setting key
        default: Default value if not found

    Returns:
        The setting value
    """
    return get_config_service().get(key, default)


def load_ai_config() -> AIConfig:
    """Current AIConfig from the global settings store."""
    return get_config_service().load_ai_config()
