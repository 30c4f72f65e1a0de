"""Standup CRUD with one-record-per-day enforcement and Slack notification."""

import logging
from datetime import date, timedelta
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from integrations.models import StandupCommand
from standupsync.auth.permissions import ensure_standup_owner
from standupsync.days import DayInput, day_bounds, range_bounds, to_utc_day, utc_now, utc_today
from standupsync.db.models.standup import StandupORM
from standupsync.db.models.user import UserORM
from standupsync.db.repositories.standup_repo import StandupRepository
from standupsync.errors import ConflictError, InvalidRequestError, NotFoundError
from standupsync.services.slack_service import SlackService

logger = logging.getLogger(__name__)

DUPLICATE_DAY_MESSAGE = "Standup already exists for this date"


def _clean(items: Optional[Sequence[str]]) -> list[str]:
    return [item.strip() for item in items or [] if item and item.strip()]


class StandupService:
    """Standup operations scoped to the caller's team.

    Args:
        session: Async database session; each mutating call commits.
        slack: Slack service used for best-effort notification.
    """

    def __init__(self, session: AsyncSession, slack: Optional[SlackService] = None) -> None:
        self._session = session
        self._repo = StandupRepository(session)
        self._slack = slack or SlackService(session)

    async def list_for_user(
        self,
        user: UserORM,
        day: Optional[DayInput] = None,
        user_id: Optional[UUID] = None,
    ) -> list[StandupORM]:
        """Standups of one teammate, the caller by default, optionally for one day."""
        start = end = None
        if day is not None:
            start, end = day_bounds(to_utc_day(day))
        return await self._repo.find(
            team_id=user.team_id,
            user_id=user_id or user.id,
            start=start,
            end=end,
        )

    async def list_range(
        self,
        user: UserORM,
        start_day: Optional[DayInput],
        end_day: Optional[DayInput],
        user_id: Optional[UUID] = None,
    ) -> list[StandupORM]:
        """Standups for the inclusive day range; the whole team unless ``user_id`` is given."""
        if not start_day or not end_day:
            raise InvalidRequestError("startDate and endDate are required")
        start, end = range_bounds(to_utc_day(start_day), to_utc_day(end_day))
        return await self._repo.find(team_id=user.team_id, user_id=user_id, start=start, end=end)

    async def list_team_day(self, user: UserORM, day: DayInput) -> list[StandupORM]:
        """All teammates' standups for a day, latest submission first."""
        start, end = day_bounds(to_utc_day(day))
        return await self._repo.find(
            team_id=user.team_id, start=start, end=end, newest_submission_first=True
        )

    async def get(self, user: UserORM, standup_id: UUID) -> StandupORM:
        standup = await self._repo.get_by_id(standup_id)
        if standup is None or standup.team_id != user.team_id:
            raise NotFoundError("Standup not found")
        return standup

    async def _insert(self, standup: StandupORM) -> StandupORM:
        self._session.add(standup)
        try:
            await self._session.commit()
        except IntegrityError as e:
            # Lost the race against a concurrent insert for the same day
            await self._session.rollback()
            logger.warning(
                f"standup_create_conflict: user_id={standup.user_id}, date={standup.date}"
            )
            raise ConflictError(DUPLICATE_DAY_MESSAGE) from e
        await self._session.refresh(standup)
        return standup

    async def _notify_created(self, user: UserORM, standup: StandupORM) -> None:
        ts = await self._slack.post_standup(user.team_id, user.name, standup)
        if ts:
            standup.slack_message_ts = ts
            await self._session.commit()

    async def create(
        self,
        user: UserORM,
        day: DayInput,
        yesterday_work: Optional[Sequence[str]] = None,
        today_plan: Optional[Sequence[str]] = None,
        blockers: Optional[Sequence[str]] = None,
    ) -> StandupORM:
        """Create the caller's standup for a day and announce it on Slack.

        Raises:
            InvalidRequestError: If no day is given.
            ConflictError: If the caller already has a standup for that day.
        """
        if day is None:
            raise InvalidRequestError("Date is required")
        the_day = to_utc_day(day)

        start, end = day_bounds(the_day)
        if await self._repo.get_for_day(user.id, start, end) is not None:
            logger.info(f"standup_create_conflict: user_id={user.id}, date={the_day}")
            raise ConflictError(DUPLICATE_DAY_MESSAGE)

        now = utc_now()
        standup = await self._insert(
            StandupORM(
                user_id=user.id,
                team_id=user.team_id,
                date=the_day,
                yesterday_work=_clean(yesterday_work),
                today_plan=_clean(today_plan),
                blockers=_clean(blockers),
                submitted_at=now,
                updated_at=now,
            )
        )
        logger.info(f"standup_created: standup_id={standup.id}, user_id={user.id}, date={the_day}")

        await self._notify_created(user, standup)
        return standup

    async def update(
        self,
        user: UserORM,
        standup_id: UUID,
        yesterday_work: Optional[Sequence[str]] = None,
        today_plan: Optional[Sequence[str]] = None,
        blockers: Optional[Sequence[str]] = None,
    ) -> StandupORM:
        """Replace the provided lists of the caller's own standup.

        Raises:
            NotFoundError: If the standup does not exist.
            PermissionDeniedError: If it belongs to someone else.
        """
        standup = await self._repo.get_by_id(standup_id)
        if standup is None:
            raise NotFoundError("Standup not found")
        ensure_standup_owner(user, standup)

        if yesterday_work is not None:
            standup.yesterday_work = _clean(yesterday_work)
        if today_plan is not None:
            standup.today_plan = _clean(today_plan)
        if blockers is not None:
            standup.blockers = _clean(blockers)
        standup.touch()
        await self._session.commit()
        await self._session.refresh(standup)
        logger.info(f"standup_updated: standup_id={standup.id}, user_id={user.id}")

        await self._slack.update_standup(user.team_id, user.name, standup)
        return standup

    async def delete(self, user: UserORM, standup_id: UUID) -> None:
        """Delete the caller's own standup.

        Raises:
            NotFoundError: If the standup does not exist.
            PermissionDeniedError: If it belongs to someone else.
        """
        standup = await self._repo.get_by_id(standup_id)
        if standup is None:
            raise NotFoundError("Standup not found")
        ensure_standup_owner(user, standup)

        await self._repo.delete(standup)
        await self._session.commit()
        logger.info(f"standup_deleted: standup_id={standup_id}, user_id={user.id}")

    async def submit_from_command(
        self, user: UserORM, command: StandupCommand
    ) -> tuple[StandupORM, bool]:
        """Create or update today's standup from a parsed slash command.

        On update only the segments present in the command replace stored
        lists. On create, absent segments start empty.

        Returns:
            The standup and whether it was newly created.
        """
        today = utc_today()
        start, end = day_bounds(today)
        existing = await self._repo.get_for_day(user.id, start, end)

        if existing is not None:
            if command.yesterday is not None:
                existing.yesterday_work = list(command.yesterday)
            if command.today is not None:
                existing.today_plan = list(command.today)
            if command.blockers is not None:
                existing.blockers = list(command.blockers)
            existing.touch()
            await self._session.commit()
            await self._session.refresh(existing)
            logger.info(f"standup_command_updated: standup_id={existing.id}, user_id={user.id}")

            await self._slack.update_standup(user.team_id, user.name, existing)
            return existing, False

        now = utc_now()
        standup = await self._insert(
            StandupORM(
                user_id=user.id,
                team_id=user.team_id,
                date=today,
                yesterday_work=list(command.yesterday or []),
                today_plan=list(command.today or []),
                blockers=list(command.blockers or []),
                submitted_at=now,
                updated_at=now,
            )
        )
        logger.info(f"standup_command_created: standup_id={standup.id}, user_id={user.id}")

        await self._notify_created(user, standup)
        return standup, True

    async def append_note(self, user: UserORM, note: str) -> StandupORM:
        """Append a line to tomorrow's plan, creating tomorrow's standup if needed.

        Nothing is posted to Slack; the note is picked up when the standup
        itself is submitted.

        Raises:
            InvalidRequestError: If the note is blank.
        """
        note = (note or "").strip()
        if not note:
            raise InvalidRequestError("Note text is required")

        tomorrow: date = utc_today() + timedelta(days=1)
        start, end = day_bounds(tomorrow)
        standup = await self._repo.get_for_day(user.id, start, end)

        if standup is None:
            now = utc_now()
            standup = await self._insert(
                StandupORM(
                    user_id=user.id,
                    team_id=user.team_id,
                    date=tomorrow,
                    yesterday_work=[],
                    today_plan=[note],
                    blockers=[],
                    submitted_at=now,
                    updated_at=now,
                )
            )
        else:
            # Assign a new list so the JSON column is marked dirty
            standup.today_plan = [*standup.today_plan, note]
            standup.touch()
            await self._session.commit()
            await self._session.refresh(standup)

        logger.info(f"standup_note_appended: standup_id={standup.id}, user_id={user.id}")
        return standup
