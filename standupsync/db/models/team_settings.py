"""Per-team Slack connection settings ORM model."""

from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from standupsync.db.base import Base, TimestampMixin, UUIDMixin


class TeamSettingsORM(Base, UUIDMixin, TimestampMixin):
    """Slack workspace connection for a team.

    ``slack_access_token`` is a bot token and must never be serialized into
    an API response. Maps to the ``team_settings`` table.
    """

    __tablename__ = "team_settings"

    team_id: Mapped[UUID] = mapped_column(
        ForeignKey("team.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    slack_access_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    slack_channel_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    slack_channel_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    slack_team_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    slack_team_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    slack_bot_user_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_slack_connected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def can_post(self) -> bool:
        """Whether a standup message can be posted for this team."""
        return bool(self.is_slack_connected and self.slack_access_token and self.slack_channel_id)
