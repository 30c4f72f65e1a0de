"""Tests for StandupService over SQLite."""

from datetime import date, timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from integrations.models import StandupCommand
from standupsync.days import utc_today
from standupsync.db.models.standup import StandupORM
from standupsync.db.models.user import UserORM
from standupsync.db.repositories.standup_repo import StandupRepository
from standupsync.errors import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    PermissionDeniedError,
)
from standupsync.services.slack_service import SlackService
from standupsync.services.standup_service import DUPLICATE_DAY_MESSAGE, StandupService

DAY = date(2024, 3, 15)


async def _connect_slack(slack_service: SlackService, user: UserORM) -> None:
    await slack_service.configure(user.team_id, "xoxb-test", "C123", "standups")


class TestCreate:
    """Tests for StandupService.create."""

    @pytest.mark.asyncio
    async def test_create_stores_day_and_lists(
        self, standup_service: StandupService, member: UserORM
    ) -> None:
        """The standup belongs to the caller and their team, on the given day."""
        standup = await standup_service.create(
            member, DAY, yesterday_work=["shipped login"], today_plan=["review"], blockers=[]
        )

        assert standup.user_id == member.id
        assert standup.team_id == member.team_id
        assert standup.date == DAY
        assert standup.yesterday_work == ["shipped login"]
        assert standup.today_plan == ["review"]
        assert standup.blockers == []

    @pytest.mark.asyncio
    async def test_timestamp_reduced_to_utc_day(
        self, standup_service: StandupService, member: UserORM
    ) -> None:
        """A timestamp input lands on its UTC calendar day."""
        standup = await standup_service.create(member, "2024-03-15T22:30:00-05:00")
        assert standup.date == date(2024, 3, 16)

    @pytest.mark.asyncio
    async def test_items_trimmed_and_blanks_dropped(
        self, standup_service: StandupService, member: UserORM
    ) -> None:
        """Whitespace-only items are not stored."""
        standup = await standup_service.create(member, DAY, today_plan=["  a ", "", "   ", "b"])
        assert standup.today_plan == ["a", "b"]

    @pytest.mark.asyncio
    async def test_duplicate_day_rejected(
        self, standup_service: StandupService, member: UserORM
    ) -> None:
        """A second standup for the same day is a conflict, whatever the time of day."""
        await standup_service.create(member, "2024-03-15T08:00:00Z")
        with pytest.raises(ConflictError, match=DUPLICATE_DAY_MESSAGE):
            await standup_service.create(member, "2024-03-15T20:00:00Z")

    @pytest.mark.asyncio
    async def test_lost_insert_race_is_conflict(
        self,
        standup_service: StandupService,
        member: UserORM,
        db_session: AsyncSession,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """When the pre-check misses a concurrent insert, the unique index still yields a conflict."""
        member_id = member.id
        await standup_service.create(member, DAY)
        monkeypatch.setattr(StandupRepository, "get_for_day", AsyncMock(return_value=None))

        with pytest.raises(ConflictError, match=DUPLICATE_DAY_MESSAGE):
            await standup_service.create(member, DAY)

        # The rollback expired loaded rows, so count with the captured id
        count = await db_session.scalar(
            select(func.count()).select_from(StandupORM).where(StandupORM.user_id == member_id)
        )
        assert count == 1

    @pytest.mark.asyncio
    async def test_same_day_for_different_users(
        self, standup_service: StandupService, admin: UserORM, member: UserORM
    ) -> None:
        """The one-per-day rule is per user."""
        await standup_service.create(admin, DAY)
        await standup_service.create(member, DAY)

    @pytest.mark.asyncio
    async def test_missing_day_rejected(
        self, standup_service: StandupService, member: UserORM
    ) -> None:
        """A day is required."""
        with pytest.raises(InvalidRequestError, match="Date is required"):
            await standup_service.create(member, None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_not_posted_without_slack(
        self, standup_service: StandupService, member: UserORM, slack_adapter: AsyncMock
    ) -> None:
        """Teams without Slack get no message and no timestamp."""
        standup = await standup_service.create(member, DAY, today_plan=["x"])

        slack_adapter.post_message.assert_not_called()
        assert standup.slack_message_ts is None

    @pytest.mark.asyncio
    async def test_posted_and_ts_stored_with_slack(
        self,
        standup_service: StandupService,
        slack_service: SlackService,
        member: UserORM,
        slack_adapter: AsyncMock,
    ) -> None:
        """A connected team gets the formatted message; its ts is kept."""
        await _connect_slack(slack_service, member)

        standup = await standup_service.create(member, DAY, today_plan=["pair on billing"])

        slack_adapter.post_message.assert_awaited_once()
        channel, text = slack_adapter.post_message.call_args.args
        assert channel == "C123"
        assert "*Daily Standup from Max Member*" in text
        assert "• pair on billing" in text
        assert standup.slack_message_ts == "1700000000.000100"

    @pytest.mark.asyncio
    async def test_slack_failure_does_not_fail_create(
        self,
        standup_service: StandupService,
        slack_service: SlackService,
        member: UserORM,
        slack_adapter: AsyncMock,
    ) -> None:
        """Posting is best-effort; the standup is still stored."""
        await _connect_slack(slack_service, member)
        slack_adapter.post_message.side_effect = RuntimeError("slack down")

        standup = await standup_service.create(member, DAY)

        assert standup.id is not None
        assert standup.slack_message_ts is None
        assert len(await standup_service.list_for_user(member)) == 1


class TestQueries:
    """Tests for listing standups."""

    @pytest.mark.asyncio
    async def test_list_for_user_defaults_to_caller(
        self, standup_service: StandupService, admin: UserORM, member: UserORM
    ) -> None:
        """Without user_id, only the caller's standups are listed."""
        await standup_service.create(admin, DAY)
        await standup_service.create(member, DAY)

        mine = await standup_service.list_for_user(member)
        assert [s.user_id for s in mine] == [member.id]

    @pytest.mark.asyncio
    async def test_list_for_user_teammate_and_day(
        self, standup_service: StandupService, admin: UserORM, member: UserORM
    ) -> None:
        """A teammate's standups can be listed, narrowed to a single day."""
        await standup_service.create(member, DAY)
        await standup_service.create(member, DAY + timedelta(days=1))

        found = await standup_service.list_for_user(admin, day="2024-03-16", user_id=member.id)
        assert [s.date for s in found] == [date(2024, 3, 16)]

    @pytest.mark.asyncio
    async def test_list_for_user_other_team_is_empty(
        self, standup_service: StandupService, member: UserORM, outsider: UserORM
    ) -> None:
        """Naming a user from another team yields nothing."""
        await standup_service.create(outsider, DAY)
        assert await standup_service.list_for_user(member, user_id=outsider.id) == []

    @pytest.mark.asyncio
    async def test_list_range_whole_team(
        self, standup_service: StandupService, admin: UserORM, member: UserORM
    ) -> None:
        """Range listing covers both end days for every teammate."""
        await standup_service.create(admin, date(2024, 3, 11))
        await standup_service.create(member, date(2024, 3, 13))
        await standup_service.create(member, date(2024, 3, 18))

        found = await standup_service.list_range(admin, "2024-03-11", "2024-03-17")
        assert sorted(s.date for s in found) == [date(2024, 3, 11), date(2024, 3, 13)]

    @pytest.mark.asyncio
    async def test_list_range_reversed(
        self, standup_service: StandupService, admin: UserORM
    ) -> None:
        """start after end is rejected."""
        with pytest.raises(InvalidRequestError):
            await standup_service.list_range(admin, "2024-03-17", "2024-03-11")

    @pytest.mark.asyncio
    async def test_team_day_excludes_other_teams(
        self,
        standup_service: StandupService,
        admin: UserORM,
        member: UserORM,
        outsider: UserORM,
    ) -> None:
        """The team view for a day shows teammates only."""
        await standup_service.create(admin, DAY)
        await standup_service.create(member, DAY)
        await standup_service.create(outsider, DAY)

        found = await standup_service.list_team_day(member, "2024-03-15")
        assert {s.user_id for s in found} == {admin.id, member.id}

    @pytest.mark.asyncio
    async def test_get_hides_other_teams(
        self, standup_service: StandupService, member: UserORM, outsider: UserORM
    ) -> None:
        """Another team's standup looks like it does not exist."""
        standup = await standup_service.create(outsider, DAY)
        with pytest.raises(NotFoundError):
            await standup_service.get(member, standup.id)


class TestUpdateAndDelete:
    """Tests for owner-only modification."""

    @pytest.mark.asyncio
    async def test_update_replaces_only_given_lists(
        self, standup_service: StandupService, member: UserORM
    ) -> None:
        """Omitted lists keep their values; updated_at moves."""
        standup = await standup_service.create(
            member, DAY, yesterday_work=["y"], today_plan=["t"], blockers=["b"]
        )
        before = standup.updated_at

        updated = await standup_service.update(member, standup.id, today_plan=["t2", " "])

        assert updated.yesterday_work == ["y"]
        assert updated.today_plan == ["t2"]
        assert updated.blockers == ["b"]
        assert updated.updated_at >= before

    @pytest.mark.asyncio
    async def test_update_by_teammate_denied(
        self, standup_service: StandupService, admin: UserORM, member: UserORM
    ) -> None:
        """Even an admin cannot edit someone else's standup."""
        standup = await standup_service.create(member, DAY)
        with pytest.raises(PermissionDeniedError, match="only modify your own"):
            await standup_service.update(admin, standup.id, blockers=["nope"])

    @pytest.mark.asyncio
    async def test_update_missing(self, standup_service: StandupService, member: UserORM) -> None:
        """Unknown ids are 404."""
        with pytest.raises(NotFoundError, match="Standup not found"):
            await standup_service.update(member, uuid4(), blockers=[])

    @pytest.mark.asyncio
    async def test_update_edits_posted_message(
        self,
        standup_service: StandupService,
        slack_service: SlackService,
        member: UserORM,
        slack_adapter: AsyncMock,
    ) -> None:
        """A posted standup's Slack message is edited in place."""
        await _connect_slack(slack_service, member)
        standup = await standup_service.create(member, DAY, today_plan=["a"])

        await standup_service.update(member, standup.id, today_plan=["b"])

        slack_adapter.update_message.assert_awaited_once()
        channel, ts, text = slack_adapter.update_message.call_args.args
        assert (channel, ts) == ("C123", "1700000000.000100")
        assert "• b" in text

    @pytest.mark.asyncio
    async def test_delete_own(self, standup_service: StandupService, member: UserORM) -> None:
        """Authors can delete their standups."""
        standup = await standup_service.create(member, DAY)
        await standup_service.delete(member, standup.id)
        assert await standup_service.list_for_user(member) == []

    @pytest.mark.asyncio
    async def test_delete_other_denied(
        self, standup_service: StandupService, admin: UserORM, member: UserORM
    ) -> None:
        """Teammates cannot delete each other's standups."""
        standup = await standup_service.create(member, DAY)
        with pytest.raises(PermissionDeniedError):
            await standup_service.delete(admin, standup.id)

    @pytest.mark.asyncio
    async def test_delete_other_team_denied(
        self, standup_service: StandupService, member: UserORM, outsider: UserORM
    ) -> None:
        """Cross-team deletes are denied."""
        standup = await standup_service.create(outsider, DAY)
        with pytest.raises(PermissionDeniedError, match="Access denied"):
            await standup_service.delete(member, standup.id)


class TestSlashCommandSubmission:
    """Tests for submit_from_command and append_note."""

    @pytest.mark.asyncio
    async def test_first_submission_creates_today(
        self, standup_service: StandupService, member: UserORM
    ) -> None:
        """The first command of the day creates today's standup."""
        command = StandupCommand(yesterday=["a"], today=["b", "c"])

        standup, created = await standup_service.submit_from_command(member, command)

        assert created is True
        assert standup.date == utc_today()
        assert standup.yesterday_work == ["a"]
        assert standup.today_plan == ["b", "c"]
        assert standup.blockers == []

    @pytest.mark.asyncio
    async def test_second_submission_updates_present_segments(
        self, standup_service: StandupService, member: UserORM
    ) -> None:
        """Later commands replace only the segments they contain."""
        await standup_service.submit_from_command(
            member, StandupCommand(yesterday=["a"], today=["b"], blockers=["c"])
        )

        standup, created = await standup_service.submit_from_command(
            member, StandupCommand(blockers=[])
        )

        assert created is False
        assert standup.yesterday_work == ["a"]
        assert standup.today_plan == ["b"]
        assert standup.blockers == []
        assert len(await standup_service.list_for_user(member)) == 1

    @pytest.mark.asyncio
    async def test_append_note_creates_tomorrow(
        self, standup_service: StandupService, member: UserORM
    ) -> None:
        """A note with no standup for tomorrow starts one."""
        standup = await standup_service.append_note(member, "  check CI  ")

        assert standup.date == utc_today() + timedelta(days=1)
        assert standup.today_plan == ["check CI"]
        assert standup.yesterday_work == []

    @pytest.mark.asyncio
    async def test_append_note_appends(
        self, standup_service: StandupService, member: UserORM
    ) -> None:
        """Notes accumulate in order on tomorrow's plan."""
        await standup_service.append_note(member, "first")
        standup = await standup_service.append_note(member, "second")

        assert standup.today_plan == ["first", "second"]

    @pytest.mark.asyncio
    async def test_append_note_persists(
        self, standup_service: StandupService, member: UserORM, db_session: AsyncSession
    ) -> None:
        """Appended notes survive a reload from the database."""
        await standup_service.append_note(member, "first")
        standup = await standup_service.append_note(member, "second")

        db_session.expunge_all()
        reloaded = await standup_service.get(member, standup.id)
        assert reloaded.today_plan == ["first", "second"]

    @pytest.mark.asyncio
    async def test_append_note_never_posts(
        self,
        standup_service: StandupService,
        slack_service: SlackService,
        member: UserORM,
        slack_adapter: AsyncMock,
    ) -> None:
        """Quick notes stay out of the channel."""
        await _connect_slack(slack_service, member)
        await standup_service.append_note(member, "quiet")

        slack_adapter.post_message.assert_not_called()
        slack_adapter.update_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_blank_note_rejected(
        self, standup_service: StandupService, member: UserORM
    ) -> None:
        """An empty note is an error."""
        with pytest.raises(InvalidRequestError, match="Note text is required"):
            await standup_service.append_note(member, "   ")
