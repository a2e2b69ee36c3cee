# memhub/knowledge_base/embedding/embedding_service.py
"""
Embedding service for event text.

This service provides:
- Single text embedding through the configured embedding provider
- Upsert of one vector per event
- Resumable backfill of events that have no vector yet
"""

import logging
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.dialects import postgresql, sqlite

from memhub.config import settings
from memhub.db.session import get_db_session
from memhub.models.event import Event, EventEmbedding
from memhub.services.config_service import AIConfig, load_ai_config
from memhub.services.exceptions import ConfigurationError, EmbeddingError, GenerationError
from memhub.services.llm_providers import LLMProvider, create_client, get_provider_info
from memhub.services.llm_providers.catalog import FALLBACK_EMBEDDING_MODEL, FALLBACK_EMBEDDING_PROVIDER

logger = logging.getLogger(__name__)

# INSERT ... ON CONFLICT(event_id) DO UPDATE, per dialect
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass
class EmbeddingResult:
    """Result of embedding generation."""
    text: str
    embedding: List[float]
    model: str
    provider: str

    @property
    def dimensions(self) -> int:
        return len(self.embedding)


@dataclass
class BackfillStats:
    """Counters reported by one backfill run."""
    candidates: int = 0
    embedded: int = 0
    skipped: int = 0
    failed: int = 0
    errors: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidates": self.candidates,
            "embedded": self.embedded,
            "skipped": self.skipped,
            "failed": self.failed,
            "errors": list(self.errors),
        }


def resolve_embedding_target(config: AIConfig) -> Tuple[str, str]:
    """
    Pick the (provider, model) pair used for embeddings.

    Chat-only providers fall back to Gemini's text-embedding-004; a missing
    model falls back to the provider's default embedding model.

    Raises:
        ConfigurationError: unknown embedding provider
    """
    provider = (config.embedding_provider or FALLBACK_EMBEDDING_PROVIDER).lower()
    info = get_provider_info(provider)
    if info is None:
        raise ConfigurationError(f"Unknown embedding provider: {provider}")

    if not info.supports_embeddings:
        logger.debug(
            f"{info.display_name} has no embedding endpoint, "
            f"using {FALLBACK_EMBEDDING_PROVIDER}/{FALLBACK_EMBEDDING_MODEL}"
        )
        return FALLBACK_EMBEDDING_PROVIDER, FALLBACK_EMBEDDING_MODEL

    return provider, config.embedding_model or info.default_embedding_model


def normalize_vector(raw: Any, provider: Optional[str] = None) -> List[float]:
    """
    Flatten a provider embedding payload into a list of floats.

    Accepts a plain list, a single-row nested list, or the wrapper objects
    providers return ({"values": [...]}, {"embedding": ...}).

    Raises:
        EmbeddingError: payload is empty or not numeric
    """
    if isinstance(raw, dict):
        for key in ("values", "embedding", "embeddings"):
            if key in raw:
                return normalize_vector(raw[key], provider)
        raise EmbeddingError(f"Unrecognized embedding payload keys: {sorted(raw)}", provider=provider)

    if not isinstance(raw, (list, tuple)) or not raw:
        raise EmbeddingError("Provider returned an empty embedding", provider=provider)

    if len(raw) == 1 and isinstance(raw[0], (list, tuple, dict)):
        return normalize_vector(raw[0], provider)

    try:
        return [float(x) for x in raw]
    except (TypeError, ValueError) as e:
        raise EmbeddingError(f"Non-numeric embedding values: {e}", provider=provider) from e


class EmbeddingService:
    """
    Service for generating and storing event embeddings.

    Args:
        config: Fixed AIConfig; when None a fresh snapshot is read per call.
        client_factory: Builds provider clients (create_client by default).
        session_factory: Session factory for the relational store.
        delay_seconds: Pause after each provider call during backfill.
        min_text_length: Events with shorter text are skipped by backfill.
        sleep: Sleep function used for the backfill pause.
    """

    def __init__(
        self,
        config: Optional[AIConfig] = None,
        client_factory: Callable[[str, AIConfig], LLMProvider] = create_client,
        session_factory=None,
        delay_seconds: Optional[float] = None,
        min_text_length: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config
        self._client_factory = client_factory
        self._session_factory = session_factory
        self._delay_seconds = settings.BACKFILL_DELAY_SECONDS if delay_seconds is None else delay_seconds
        self._min_text_length = settings.BACKFILL_MIN_TEXT_LENGTH if min_text_length is None else min_text_length
        self._sleep = sleep

    def _current_config(self) -> AIConfig:
        return self._config or load_ai_config()

    def current_model(self) -> str:
        """Embedding model that the current configuration resolves to."""
        return resolve_embedding_target(self._current_config())[1]

    def embed_text(self, text: str) -> EmbeddingResult:
        """
        Generate embedding for a single text.

        Raises:
            ConfigurationError: embedding provider not configured
            EmbeddingError / GenerationError: provider call failed or
                returned no usable vector
        """
        config = self._current_config()
        provider, model = resolve_embedding_target(config)
        client = self._client_factory(provider, config)

        try:
            raw = client.embed(model, text)
        except (ConfigurationError, GenerationError) as e:
            logger.error(f"Embedding generation error ({provider}): {e}")
            raise
        except Exception as e:
            logger.error(f"Embedding generation error ({provider}): {e}")
            raise EmbeddingError(f"Embedding failed: {e}", provider=provider) from e

        if raw is None:
            raise EmbeddingError("Failed to generate embedding", provider=provider)

        embedding = normalize_vector(raw, provider)
        logger.debug(f"Generated embedding for text (len={len(text)}), dims={len(embedding)}")
        return EmbeddingResult(text=text, embedding=embedding, model=model, provider=provider)

    def generate_embedding(self, text: str) -> List[float]:
        return self.embed_text(text).embedding

    def save_embedding(self, event_id: str, vector: Sequence[float], model: Optional[str] = None) -> None:
        """Insert or replace the vector stored for *event_id*."""
        if model is None:
            model = self.current_model()

        row = {
            "event_id": event_id,
            "vector": [float(x) for x in vector],
            "model": model,
            "created_at": datetime.utcnow(),
        }
        with get_db_session(self._session_factory) as db:
            insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
            if insert is None:
                raise NotImplementedError(f"No embedding upsert for dialect {db.get_bind().dialect.name}")
            stmt = insert(EventEmbedding).values(**row)
            stmt = stmt.on_conflict_do_update(
                index_elements=[EventEmbedding.event_id],
                set_={
                    "vector": stmt.excluded.vector,
                    "model": stmt.excluded.model,
                    "created_at": stmt.excluded.created_at,
                },
            )
            db.execute(stmt)

    def embed_event(self, event_id: str, text: Optional[str]) -> Optional[EmbeddingResult]:
        """Embed and store one event. Returns None when its text is too short."""
        if not text or len(text.strip()) < self._min_text_length:
            logger.debug(f"Skipping embedding for {event_id}: text too short")
            return None
        result = self.embed_text(text)
        self.save_embedding(event_id, result.embedding, result.model)
        return result

    def find_events_missing_embeddings(self) -> List[Tuple[str, Optional[str]]]:
        """(id, text) of every event without a stored vector."""
        with get_db_session(self._session_factory) as db:
            rows = (
                db.query(Event.id, Event.text)
                .outerjoin(EventEmbedding, EventEmbedding.event_id == Event.id)
                .filter(EventEmbedding.event_id.is_(None))
                .order_by(Event.timestamp)
                .all()
            )
            return [(row.id, row.text) for row in rows]

    def backfill_embeddings(self) -> BackfillStats:
        """
        Embed every event that has no vector yet, one at a time.

        Per-event failures are logged and counted; the run continues. A
        ConfigurationError aborts the run since every event would fail.
        """
        logger.info("Starting embedding backfill...")
        pending = self.find_events_missing_embeddings()
        stats = BackfillStats(candidates=len(pending))
        logger.info(f"Found {len(pending)} events needing embeddings.")

        for event_id, text in pending:
            if not text or len(text.strip()) < self._min_text_length:
                stats.skipped += 1
                continue

            try:
                result = self.embed_text(text)
                self.save_embedding(event_id, result.embedding, result.model)
                stats.embedded += 1
                logger.debug(f"Generated embedding for {event_id}")
            except ConfigurationError:
                logger.error("Embedding backfill aborted: provider not configured")
                raise
            except Exception as e:
                stats.failed += 1
                stats.errors.append({"event_id": event_id, "error": str(e)})
                logger.error(f"Failed to embed event {event_id}: {e}")

            if self._delay_seconds > 0:
                self._sleep(self._delay_seconds)

        logger.info(
            f"Backfill complete: {stats.embedded} embedded, "
            f"{stats.skipped} skipped, {stats.failed} failed"
        )
        return stats

    def start_backfill(self, executor: Optional[Executor] = None) -> Future:
        """
        Run backfill_embeddings in the background.

        Returns:
            Future resolving to BackfillStats; callers may wait on it or drop it.
        """
        future = (executor or _get_backfill_executor()).submit(self.backfill_embeddings)
        future.add_done_callback(_log_backfill_outcome)
        return future


def _log_backfill_outcome(future: Future) -> None:
    if future.cancelled():
        logger.warning("Embedding backfill cancelled")
        return
    error = future.exception()
    if error is not None:
        logger.error(f"Embedding backfill failed: {error}")


# Single worker: backfills queue up instead of racing each other
_backfill_executor: Optional[ThreadPoolExecutor] = None


def _get_backfill_executor() -> ThreadPoolExecutor:
    global _backfill_executor
    if _backfill_executor is None:
        _backfill_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="embedding-backfill")
    return _backfill_executor


# Singleton instance
_embedding_service: Optional[EmbeddingService] = None


def get_embedding_service() -> EmbeddingService:
    """Get or create the singleton embedding service."""
    global _embedding_service
    if _embedding_service is None:
        _embedding_service = EmbeddingService()
    return _embedding_service
