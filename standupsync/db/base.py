"""SQLAlchemy declarative base and common mixins."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from standupsync.days import utc_now


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all ORM models."""

    pass


class UUIDMixin:
    """Mixin providing a UUID primary key with an auto-generated uuid4 default."""

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamps.

    Both columns are set on insert. ``updated_at`` has no ``onupdate`` hook;
    services assign it explicitly whenever they mutate a row, so the value
    only moves when a user-visible change was made.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, server_default=func.now()
    )

    def touch(self) -> None:
        """Mark the row as modified now."""
        self.updated_at = utc_now()
