"""FastAPI application factory with async lifespan management."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.ext.asyncio import AsyncEngine

from standupsync import __version__
from standupsync.api.middleware import (
    RequestIdMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    error_handling_middleware,
    request_validation_handler,
)
from standupsync.api.routers import (
    auth_router,
    health_router,
    slack_router,
    standups_router,
    users_router,
)
from standupsync.db.engine import get_engine
from standupsync.settings import Settings, load_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(settings: Settings) -> None:
    """Route stdlib logging to stderr at the configured level."""
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage FastAPI application lifespan (startup and shutdown).

    Validates that both JWT secrets are configured and creates the database
    engine, which is stored on app.state for the get_db dependency.

    Args:
        app: FastAPI application instance.

    Yields:
        None during the application runtime.
    """
    settings = load_settings()
    app.state.settings = settings
    logger.info("app_startup: initializing resources")

    if not settings.jwt_secret_key or not settings.jwt_refresh_secret_key:
        raise RuntimeError(
            "JWT_SECRET_KEY and JWT_REFRESH_SECRET_KEY must be set in environment or .env file. "
            "Generate them with: python -c \"import secrets; print(secrets.token_urlsafe(64))\""
        )

    engine: Optional[AsyncEngine] = None
    if settings.database_url:
        engine = await get_engine(
            database_url=settings.database_url,
            pool_size=settings.database_pool_size,
            pool_overflow=settings.database_pool_overflow,
        )
        logger.info("db_engine_initialized")
    else:
        logger.warning("db_engine_skipped: database_url not configured")
    app.state.engine = engine

    logger.info("app_startup_complete: resources initialized")
    yield

    logger.info("app_shutdown: cleaning up resources")
    if engine is not None:
        try:
            await engine.dispose()
            logger.info("db_engine_disposed: connection pool closed")
        except Exception as e:
            logger.warning(f"db_engine_dispose_error: error={str(e)}")
    logger.info("app_shutdown_complete: all resources cleaned up")


def create_app() -> FastAPI:
    """Create and configure FastAPI application instance.

    Returns:
        Configured FastAPI application with lifespan, middleware, and routes.
    """
    settings = load_settings()
    configure_logging(settings)

    app = FastAPI(
        title="StandupSync API",
        version=__version__,
        description="Team standups with Slack integration",
        lifespan=lifespan,
    )

    # Starlette runs middleware LIFO (last registered = first to run).
    # Execution order: CORS -> ErrorHandler -> RequestID -> RequestLogging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.middleware("http")(error_handling_middleware)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    configure_cors(app, settings)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(standups_router)
    app.include_router(users_router)
    app.include_router(slack_router)

    logger.info(
        f"app_created: title=StandupSync API, version={__version__}, routers=5, "
        "middleware=cors,error_handler,request_id,request_logging"
    )
    return app
