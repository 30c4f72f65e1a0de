"""Liveness and readiness health check endpoints."""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from standupsync import __version__
from standupsync.api.dependencies import get_db
from standupsync.api.schemas.common import HealthResponse, ServiceStatus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness check; always 200 while the process is serving."""
    return HealthResponse(status="ok", version=__version__)


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """
    Readiness check that verifies the database answers.

    Raises:
        HTTPException: 503 if the database is unavailable.
    """
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"readiness_check: database=error, error={str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database service unavailable",
        ) from e

    logger.debug("readiness_check: status=ok")
    return HealthResponse(
        status="ok",
        version=__version__,
        services={"database": ServiceStatus(status="connected")},
    )
