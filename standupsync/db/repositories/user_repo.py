"""Repository for team and user records."""

from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from standupsync.db.models.standup import StandupORM
from standupsync.db.models.user import TeamORM, UserORM
from standupsync.db.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserORM]):
    """Lookups over the ``user`` table."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserORM)

    async def get_by_email(self, email: str) -> Optional[UserORM]:
        """Case-insensitive email lookup."""
        return await self._first(select(UserORM).where(UserORM.email == email.strip().lower()))

    async def get_by_slack_id(self, slack_user_id: str) -> Optional[UserORM]:
        return await self._first(select(UserORM).where(UserORM.slack_user_id == slack_user_id))

    async def list_by_team(self, team_id: UUID) -> list[UserORM]:
        """Members of a team, newest first."""
        return await self._all(
            select(UserORM).where(UserORM.team_id == team_id).order_by(UserORM.created_at.desc())
        )

    async def list_everyone(self) -> list[UserORM]:
        """All users across every team, newest first."""
        return await self._all(select(UserORM).order_by(UserORM.created_at.desc()))

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(UserORM))
        return int(result.scalar_one())

    async def delete_with_standups(self, user: UserORM) -> None:
        """Delete a user together with every standup they own."""
        await self._session.execute(delete(StandupORM).where(StandupORM.user_id == user.id))
        await self.delete(user)


class TeamRepository(BaseRepository[TeamORM]):
    """Lookups over the ``team`` table."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TeamORM)
