"""Shared fixtures for API router tests.

Requests go through the real app, middleware and services, backed by the
in-memory SQLite database from the root conftest.
"""

from typing import AsyncGenerator, Callable, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from integrations.models import SlackConnectionInfo
from integrations.slack.adapter import SlackAdapter
from standupsync.api.app import create_app
from standupsync.api.dependencies import get_db, get_settings, get_slack_service
from standupsync.auth.jwt import create_access_token
from standupsync.db.models.user import UserORM
from standupsync.services.slack_service import SlackService
from standupsync.services.user_service import UserService
from standupsync.settings import Settings


@pytest.fixture
def slack_adapter() -> AsyncMock:
    """Adapter double standing in for the Slack Web API."""
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
async def app(
    session_factory: async_sessionmaker[AsyncSession],
    test_settings: Settings,
    slack_adapter: AsyncMock,
) -> AsyncGenerator[FastAPI, None]:
    """FastAPI application instance for testing.

    Overrides:
    - get_db yields a session on the in-memory database
    - get_settings returns the test settings
    - get_slack_service builds adapters from the Slack double

    Yields:
        Configured FastAPI application.
    """
    test_app = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    def override_get_settings() -> Settings:
        return test_settings

    def override_get_slack_service(db: AsyncSession = Depends(get_db)) -> SlackService:
        return SlackService(db, adapter_factory=MagicMock(return_value=slack_adapter))

    test_app.dependency_overrides[get_db] = override_get_db
    test_app.dependency_overrides[get_settings] = override_get_settings
    test_app.dependency_overrides[get_slack_service] = override_get_slack_service

    yield test_app

    test_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """httpx AsyncClient bound to the test app, without credentials."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def user_service(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[UserService, None]:
    """UserService on its own session, for arranging accounts directly."""
    async with session_factory() as session:
        yield UserService(session)


@pytest.fixture
async def admin(user_service: UserService) -> UserORM:
    """Owner and admin of the main test team."""
    return await user_service.create("admin@example.com", "AdminPass1", "Ada Admin")


@pytest.fixture
async def member(user_service: UserService, admin: UserORM) -> UserORM:
    """Regular member of the admin's team."""
    return await user_service.create(
        "member@example.com", "MemberPass1", "Max Member", role="user", team_id=admin.team_id
    )


@pytest.fixture
async def outsider(user_service: UserService, admin: UserORM) -> UserORM:
    """Admin of another team."""
    return await user_service.create("other@example.com", "OtherPass1", "Olga Other")


@pytest.fixture
def headers_for() -> Callable[[UserORM], Dict[str, str]]:
    """Build Authorization headers carrying a fresh access token for a user."""

    def _headers(user: UserORM) -> Dict[str, str]:
        token = create_access_token(user.id, user.team_id, user.role.value)
        return {"Authorization": f"Bearer {token}"}

    return _headers
