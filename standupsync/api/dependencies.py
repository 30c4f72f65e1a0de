"""FastAPI dependency injection for database, settings, and services."""

import logging
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from standupsync.db.engine import get_session
from standupsync.services.email_service import EmailService
from standupsync.services.slack_service import SlackService
from standupsync.services.standup_service import StandupService
from standupsync.services.user_service import UserService
from standupsync.settings import Settings, load_settings

logger = logging.getLogger(__name__)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Get async database session from app.state.engine.

    Yields an AsyncSession that is automatically closed after use.

    Raises:
        RuntimeError: If app.state.engine is not initialized.
    """
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        logger.error("get_db_error: reason=engine_not_initialized")
        raise RuntimeError(
            "Database engine not initialized. Ensure DATABASE_URL is set and app lifespan has run."
        )

    async for session in get_session(engine):
        yield session


def get_settings(request: Request) -> Settings:
    """
    Get application settings from app.state.settings.

    Falls back to load_settings() when the lifespan has not stored them.
    """
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        logger.warning(
            "get_settings_fallback: app.state.settings not initialized, loading directly"
        )
        settings = load_settings()
    return settings


def get_slack_service(db: AsyncSession = Depends(get_db)) -> SlackService:
    return SlackService(db)


def get_standup_service(
    db: AsyncSession = Depends(get_db),
    slack: SlackService = Depends(get_slack_service),
) -> StandupService:
    return StandupService(db, slack=slack)


def get_user_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, email=EmailService(settings))
