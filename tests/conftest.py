"""Shared fixtures: test settings, fast password hashing and an in-memory database."""

from typing import AsyncGenerator, Iterator
from unittest.mock import patch

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from standupsync.db.base import Base
from standupsync.db.engine import get_session_factory
from standupsync.settings import Settings

# Force all models to register with Base.metadata
import standupsync.db.models  # noqa: F401

TEST_ACCESS_SECRET = "test-access-secret-for-jwt-testing-only-not-for-production"
TEST_REFRESH_SECRET = "test-refresh-secret-for-jwt-testing-only-not-for-production"


@pytest.fixture
def test_settings() -> Settings:
    """Settings with both JWT secrets and no external services configured."""
    return Settings(
        _env_file=None,
        jwt_secret_key=TEST_ACCESS_SECRET,
        jwt_refresh_secret_key=TEST_REFRESH_SECRET,
        database_url=None,
        slack_signing_secret=None,
        postmark_api_key=None,
    )


@pytest.fixture(autouse=True)
def jwt_settings(test_settings: Settings) -> Iterator[Settings]:
    """Provide JWT secrets to token creation and decoding."""
    with patch("standupsync.auth.jwt.load_settings", return_value=test_settings):
        yield test_settings


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use the minimum bcrypt cost so tests that hash passwords stay quick."""
    monkeypatch.setattr("standupsync.auth.password.ROUNDS", 4)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the full schema created."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return get_session_factory(engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A session on the in-memory database."""
    async with session_factory() as session:
        yield session
