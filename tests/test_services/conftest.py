"""Fixtures for service tests: real services over SQLite with a fake Slack adapter."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from integrations.models import SlackConnectionInfo
from integrations.slack.adapter import SlackAdapter
from standupsync.db.models.user import UserORM
from standupsync.services.slack_service import SlackService
from standupsync.services.standup_service import StandupService
from standupsync.services.user_service import UserService


@pytest.fixture
def slack_adapter() -> AsyncMock:
    """Adapter double; every call succeeds unless a test says otherwise."""
    adapter = AsyncMock(spec=SlackAdapter)
    adapter.test_connection.return_value = SlackConnectionInfo(
        ok=True, team="Acme", team_id="T1", bot_user_id="B1"
    )
    adapter.post_message.return_value = "1700000000.000100"
    adapter.update_message.return_value = "1700000000.000100"
    adapter.list_channels.return_value = []
    adapter.list_members.return_value = []
    return adapter


@pytest.fixture
def adapter_factory(slack_adapter: AsyncMock) -> MagicMock:
    return MagicMock(return_value=slack_adapter)


@pytest.fixture
def slack_service(db_session: AsyncSession, adapter_factory: MagicMock) -> SlackService:
    return SlackService(db_session, adapter_factory=adapter_factory)


@pytest.fixture
def standup_service(db_session: AsyncSession, slack_service: SlackService) -> StandupService:
    return StandupService(db_session, slack=slack_service)


@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    return UserService(db_session)


@pytest.fixture
async def admin(user_service: UserService) -> UserORM:
    """Team owner and admin."""
    return await user_service.create("admin@example.com", "AdminPass1", "Ada Admin")


@pytest.fixture
async def member(user_service: UserService, admin: UserORM) -> UserORM:
    """Regular member of the admin's team."""
    return await user_service.create(
        "member@example.com", "MemberPass1", "Max Member", role="user", team_id=admin.team_id
    )


@pytest.fixture
async def outsider(user_service: UserService, admin: UserORM) -> UserORM:
    """Admin of a separate team."""
    return await user_service.create("other@example.com", "OtherPass1", "Olga Other")
