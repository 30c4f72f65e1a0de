"""Standup ORM model."""

import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from standupsync.days import utc_now
from standupsync.db.base import Base, UUIDMixin

# JSONB on PostgreSQL, plain JSON elsewhere
ItemList = JSON().with_variant(JSONB(), "postgresql")


class StandupORM(Base, UUIDMixin):
    """One user's standup for one UTC calendar day.

    ``date`` holds the UTC day itself, never a timestamp. The
    ``(user_id, date)`` unique constraint is what keeps concurrent
    submissions for the same day from both landing.
    Maps to the ``standup`` table.
    """

    __tablename__ = "standup"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_standup_user_date"),)

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    team_id: Mapped[UUID] = mapped_column(
        ForeignKey("team.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)

    yesterday_work: Mapped[list] = mapped_column(ItemList, nullable=False, default=list)
    today_plan: Mapped[list] = mapped_column(ItemList, nullable=False, default=list)
    blockers: Mapped[list] = mapped_column(ItemList, nullable=False, default=list)

    submitted_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    # Slack message timestamp, used to edit the posted message in place
    slack_message_ts: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def touch(self) -> None:
        self.updated_at = utc_now()
