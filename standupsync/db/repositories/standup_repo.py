"""Repository for standup records.

Every day-scoped query takes a half-open ``[start, end)`` range of UTC days
produced by :mod:`standupsync.days`.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from standupsync.db.models.standup import StandupORM
from standupsync.db.repositories.base import BaseRepository


class StandupRepository(BaseRepository[StandupORM]):
    """Queries over the ``standup`` table."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, StandupORM)

    async def find(
        self,
        team_id: UUID,
        user_id: Optional[UUID] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        newest_submission_first: bool = False,
    ) -> list[StandupORM]:
        """Team-scoped standups, optionally narrowed to a user and a day range.

        Args:
            team_id: Team the standups belong to.
            user_id: Restrict to one user when given.
            start: Inclusive lower bound (UTC day).
            end: Exclusive upper bound (UTC day).
            newest_submission_first: Order by submission time instead of day.

        Returns:
            Matching standups, newest first.
        """
        stmt = select(StandupORM).where(StandupORM.team_id == team_id)
        if user_id is not None:
            stmt = stmt.where(StandupORM.user_id == user_id)
        if start is not None:
            stmt = stmt.where(StandupORM.date >= start)
        if end is not None:
            stmt = stmt.where(StandupORM.date < end)
        if newest_submission_first:
            stmt = stmt.order_by(StandupORM.submitted_at.desc())
        else:
            stmt = stmt.order_by(StandupORM.date.desc(), StandupORM.submitted_at.desc())
        return await self._all(stmt)

    async def get_for_day(self, user_id: UUID, start: date, end: date) -> Optional[StandupORM]:
        """The user's standup inside ``[start, end)``, if any."""
        stmt = select(StandupORM).where(
            StandupORM.user_id == user_id,
            StandupORM.date >= start,
            StandupORM.date < end,
        )
        return await self._first(stmt)
