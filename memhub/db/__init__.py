# memhub/db/__init__.py
# Database module for memhub

from memhub.db.base import Base
from memhub.db.session import (
    engine,
    SessionLocal,
    get_db,
    get_db_session,
    get_session,
    init_database,
)

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_session",
    "get_session",
    "init_database",
]
