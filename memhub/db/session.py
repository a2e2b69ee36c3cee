# memhub/db/session.py
"""
SQLAlchemy session factory with FastAPI dependency injection.
Provides database session management for the retrieval layer.
"""

import logging
from typing import Any, Dict, Generator, Optional
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool

from memhub.config import settings

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Pooling options per dialect (SQLite connections cannot be shared across threads by default)."""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "poolclass": QueuePool,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,  # Enable connection health checks
        "pool_recycle": 3600,   # Recycle connections after 1 hour
    }


def create_db_engine(database_url: Optional[str] = None) -> Engine:
    """Create an engine for *database_url* (defaults to settings.DATABASE_URL)."""
    url = database_url or settings.DATABASE_URL
    db_engine = create_engine(url, **_engine_options(url))

    if url.startswith("sqlite"):
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
        @event.listens_for(db_engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    elif settings.DATABASE_SCHEMA:
        @event.listens_for(db_engine, "connect")
        def set_search_path(dbapi_connection, connection_record):
            """Set the schema search path when a connection is established."""
            cursor = dbapi_connection.cursor()
            cursor.execute(f"SET search_path TO {settings.DATABASE_SCHEMA}, public")
            cursor.close()
            dbapi_connection.commit()

    return db_engine


engine = create_db_engine()


# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database session.

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session(session_factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """
    Context manager for database session (for use outside FastAPI routes).

    Usage:
        with get_db_session() as db:
            result = db.query(Model).all()

    Args:
        session_factory: Factory to open the session from. Defaults to SessionLocal;
            services accept their own factory so tests can point them at a fixture DB.

    Yields:
        SQLAlchemy Session instance
    """
    db = (session_factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_session() -> Session:
    """
    Get a new database session (caller is responsible for closing).

    Returns:
        SQLAlchemy Session instance
    """
    return SessionLocal()


def init_database(db_engine: Optional[Engine] = None) -> None:
    """Create any missing tables. Schema migrations are owned by the host application."""
    # Register all models on Base.metadata before create_all
    import memhub.models  # noqa: F401
    from memhub.db.base import Base

    target = db_engine or engine
    logger.info(f"Initializing database tables at {target.url.render_as_string(hide_password=True)}")
    try:
        Base.metadata.create_all(bind=target)
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise
