"""Database layer: declarative base, engine, ORM models and repositories."""

from standupsync.db.base import Base, TimestampMixin, UUIDMixin
from standupsync.db.engine import get_engine, get_session

__all__ = ["Base", "TimestampMixin", "UUIDMixin", "get_engine", "get_session"]
