"""Repository for per-team Slack settings."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from standupsync.db.models.team_settings import TeamSettingsORM
from standupsync.db.repositories.base import BaseRepository


class TeamSettingsRepository(BaseRepository[TeamSettingsORM]):
    """At most one settings row per team."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TeamSettingsORM)

    async def get_for_team(self, team_id: UUID) -> Optional[TeamSettingsORM]:
        return await self._first(select(TeamSettingsORM).where(TeamSettingsORM.team_id == team_id))

    async def get_or_create(self, team_id: UUID) -> TeamSettingsORM:
        settings = await self.get_for_team(team_id)
        if settings is None:
            settings = await self.create(team_id=team_id, is_slack_connected=False)
        return settings
