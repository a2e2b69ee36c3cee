# memhub/db/base.py
"""Declarative base shared by all ORM models."""

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def qualified(table_name: str) -> str:
    """Table name prefixed with DATABASE_SCHEMA when one is configured (for ForeignKey targets)."""
    from memhub.config import settings

    if settings.DATABASE_SCHEMA:
        return f"{settings.DATABASE_SCHEMA}.{table_name}"
    return table_name
