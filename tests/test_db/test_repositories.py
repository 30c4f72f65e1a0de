"""Repository tests against an in-memory SQLite database."""

from datetime import date, timedelta
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from standupsync.days import day_bounds, range_bounds
from standupsync.db.models import StandupORM, TeamORM, UserORM, UserRole
from standupsync.db.repositories import (
    StandupRepository,
    TeamSettingsRepository,
    UserRepository,
)


async def _team(session: AsyncSession) -> TeamORM:
    team = TeamORM(name="Core", owner_id=uuid4())
    session.add(team)
    await session.flush()
    return team


async def _user(session: AsyncSession, team: TeamORM, email: str) -> UserORM:
    user = UserORM(
        email=email,
        password_hash="x",
        name=email.split("@")[0],
        role=UserRole.USER,
        team_id=team.id,
    )
    session.add(user)
    await session.flush()
    return user


async def _standup(session: AsyncSession, user: UserORM, day: date) -> StandupORM:
    standup = StandupORM(
        user_id=user.id,
        team_id=user.team_id,
        date=day,
        yesterday_work=["a"],
        today_plan=["b"],
        blockers=[],
    )
    session.add(standup)
    await session.flush()
    return standup


class TestUserRepository:
    """Tests for UserRepository lookups."""

    @pytest.mark.asyncio
    async def test_get_by_email_is_case_insensitive(self, db_session: AsyncSession) -> None:
        """Lookups lower-case the given email."""
        team = await _team(db_session)
        user = await _user(db_session, team, "dev@example.com")

        found = await UserRepository(db_session).get_by_email("  DEV@Example.com ")
        assert found is not None
        assert found.id == user.id

    @pytest.mark.asyncio
    async def test_get_by_slack_id(self, db_session: AsyncSession) -> None:
        """Users resolve by their linked Slack id."""
        team = await _team(db_session)
        user = await _user(db_session, team, "dev@example.com")
        user.slack_user_id = "U123"
        await db_session.flush()

        repo = UserRepository(db_session)
        assert (await repo.get_by_slack_id("U123")).id == user.id
        assert await repo.get_by_slack_id("U999") is None

    @pytest.mark.asyncio
    async def test_list_by_team_scoped(self, db_session: AsyncSession) -> None:
        """Team listing never includes other teams."""
        team_a = await _team(db_session)
        team_b = await _team(db_session)
        await _user(db_session, team_a, "a1@example.com")
        await _user(db_session, team_a, "a2@example.com")
        await _user(db_session, team_b, "b1@example.com")

        members = await UserRepository(db_session).list_by_team(team_a.id)
        assert {m.email for m in members} == {"a1@example.com", "a2@example.com"}

    @pytest.mark.asyncio
    async def test_count(self, db_session: AsyncSession) -> None:
        """count reflects every user."""
        repo = UserRepository(db_session)
        assert await repo.count() == 0
        team = await _team(db_session)
        await _user(db_session, team, "a@example.com")
        assert await repo.count() == 1

    @pytest.mark.asyncio
    async def test_delete_with_standups(self, db_session: AsyncSession) -> None:
        """Deleting a user removes their standups but not teammates'."""
        team = await _team(db_session)
        leaving = await _user(db_session, team, "leaving@example.com")
        staying = await _user(db_session, team, "staying@example.com")
        await _standup(db_session, leaving, date(2024, 3, 15))
        await _standup(db_session, staying, date(2024, 3, 15))

        await UserRepository(db_session).delete_with_standups(leaving)
        await db_session.commit()

        remaining = await StandupRepository(db_session).find(team_id=team.id)
        assert [s.user_id for s in remaining] == [staying.id]
        assert await UserRepository(db_session).get_by_id(leaving.id) is None


class TestStandupRepository:
    """Tests for day-bounded standup queries."""

    @pytest.mark.asyncio
    async def test_find_by_day(self, db_session: AsyncSession) -> None:
        """A single-day window returns only that day."""
        team = await _team(db_session)
        user = await _user(db_session, team, "dev@example.com")
        day = date(2024, 3, 15)
        for offset in (-1, 0, 1):
            await _standup(db_session, user, day + timedelta(days=offset))

        start, end = day_bounds(day)
        found = await StandupRepository(db_session).find(team.id, user_id=user.id, start=start, end=end)
        assert [s.date for s in found] == [day]

    @pytest.mark.asyncio
    async def test_find_range_inclusive_and_newest_first(self, db_session: AsyncSession) -> None:
        """Range queries include both end days and order by date descending."""
        team = await _team(db_session)
        user = await _user(db_session, team, "dev@example.com")
        for day in range(10, 20):
            await _standup(db_session, user, date(2024, 3, day))

        start, end = range_bounds(date(2024, 3, 12), date(2024, 3, 14))
        found = await StandupRepository(db_session).find(team.id, start=start, end=end)
        assert [s.date for s in found] == [date(2024, 3, 14), date(2024, 3, 13), date(2024, 3, 12)]

    @pytest.mark.asyncio
    async def test_find_is_team_scoped(self, db_session: AsyncSession) -> None:
        """Another team's standups are invisible even for the same day."""
        team_a = await _team(db_session)
        team_b = await _team(db_session)
        a = await _user(db_session, team_a, "a@example.com")
        b = await _user(db_session, team_b, "b@example.com")
        await _standup(db_session, a, date(2024, 3, 15))
        await _standup(db_session, b, date(2024, 3, 15))

        found = await StandupRepository(db_session).find(team_a.id)
        assert [s.user_id for s in found] == [a.id]

    @pytest.mark.asyncio
    async def test_get_for_day(self, db_session: AsyncSession) -> None:
        """get_for_day returns the user's standup in the window or None."""
        team = await _team(db_session)
        user = await _user(db_session, team, "dev@example.com")
        standup = await _standup(db_session, user, date(2024, 3, 15))

        repo = StandupRepository(db_session)
        assert (await repo.get_for_day(user.id, *day_bounds(date(2024, 3, 15)))).id == standup.id
        assert await repo.get_for_day(user.id, *day_bounds(date(2024, 3, 16))) is None


class TestTeamSettingsRepository:
    """Tests for per-team settings."""

    @pytest.mark.asyncio
    async def test_get_or_create_is_idempotent(self, db_session: AsyncSession) -> None:
        """A second call returns the same row."""
        team = await _team(db_session)
        repo = TeamSettingsRepository(db_session)

        first = await repo.get_or_create(team.id)
        second = await repo.get_or_create(team.id)

        assert first.id == second.id
        assert first.is_slack_connected is False

    @pytest.mark.asyncio
    async def test_get_for_team_missing(self, db_session: AsyncSession) -> None:
        """Teams that never configured Slack have no row."""
        assert await TeamSettingsRepository(db_session).get_for_team(uuid4()) is None
