"""Team and User ORM models."""

import enum
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from standupsync.db.base import Base, TimestampMixin, UUIDMixin


class UserRole(str, enum.Enum):
    """Role a user holds within their team.

    Maps to the ``user_role`` PostgreSQL enum type.
    """

    ADMIN = "admin"
    USER = "user"


class TeamORM(Base, UUIDMixin, TimestampMixin):
    """Team anchor entity.

    Every user, standup and settings row is scoped to a team. ``owner_id``
    names the admin who created the team; it is a plain reference rather
    than a foreign key because the owner row itself points back at the team.
    Maps to the ``team`` table.
    """

    __tablename__ = "team"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)


class UserORM(Base, UUIDMixin, TimestampMixin):
    """Account of a team member.

    Maps to the ``user`` table. Emails are stored lower-cased.
    """

    __tablename__ = "user"

    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.USER,
    )
    team_id: Mapped[UUID] = mapped_column(
        ForeignKey("team.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Invitation
    invited_by: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True)
    invited_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_invited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    slack_user_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True, index=True)

    # SHA-256 of the current refresh token; NULL when logged out
    refresh_token_hash: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
