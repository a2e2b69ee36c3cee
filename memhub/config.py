# memhub/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    # ─── Relational store ────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./memhub.db"
    DATABASE_SCHEMA: Optional[str] = None  # Postgres only; None keeps the default schema

    # ─── Provider settings source ────────────────────────────
    # When False, provider settings come from DEFAULT_SETTINGS only (no DB reads)
    USE_DB_SETTINGS: bool = True
    OLLAMA_HOST: str = "http://localhost:11434"
    LLM_REQUEST_TIMEOUT: float = 120.0

    # ─── Retrieval / RAG ─────────────────────────────────────
    BRAIN_TOP_K: int = 15
    SIMILAR_EVENTS_DEFAULT_LIMIT: int = 5

    # ─── Embedding backfill ──────────────────────────────────
    BACKFILL_DELAY_SECONDS: float = 0.2  # pause between provider calls
    BACKFILL_MIN_TEXT_LENGTH: int = 3

    # ─── HTTP app ────────────────────────────────────────────
    THREAD_POOL_SIZE: int = 16

    # ─── Tell Pydantic-Settings how to load .env ─────────────
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

# one global Settings instance
settings = Settings()
