"""Standup API endpoints, scoped to the caller's team."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from standupsync.api.dependencies import get_standup_service
from standupsync.api.schemas.common import MessageResponse
from standupsync.api.schemas.standups import (
    StandupCreate,
    StandupEnvelope,
    StandupListResponse,
    StandupResponse,
    StandupUpdate,
)
from standupsync.auth.dependencies import get_current_user
from standupsync.db.models.standup import StandupORM
from standupsync.db.models.user import UserORM
from standupsync.services.standup_service import StandupService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/standups", tags=["standups"])


def _listing(standups: list[StandupORM]) -> StandupListResponse:
    return StandupListResponse(standups=[StandupResponse.model_validate(s) for s in standups])


@router.get("", response_model=StandupListResponse)
async def list_standups(
    date: Optional[str] = Query(None, description="UTC day (YYYY-MM-DD) or ISO timestamp"),
    user_id: Optional[UUID] = Query(None, alias="userId"),
    current_user: UserORM = Depends(get_current_user),
    standups: StandupService = Depends(get_standup_service),
) -> StandupListResponse:
    """List standups of one teammate (the caller by default), optionally for one day."""
    return _listing(await standups.list_for_user(current_user, day=date, user_id=user_id))


@router.get("/range", response_model=StandupListResponse)
async def list_standups_in_range(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    user_id: Optional[UUID] = Query(None, alias="userId"),
    current_user: UserORM = Depends(get_current_user),
    standups: StandupService = Depends(get_standup_service),
) -> StandupListResponse:
    """List the team's standups between two UTC days, both inclusive."""
    return _listing(
        await standups.list_range(current_user, start_date, end_date, user_id=user_id)
    )


@router.get("/team/{date}", response_model=StandupListResponse)
async def list_team_standups(
    date: str,
    current_user: UserORM = Depends(get_current_user),
    standups: StandupService = Depends(get_standup_service),
) -> StandupListResponse:
    """List every teammate's standup for one UTC day."""
    return _listing(await standups.list_team_day(current_user, date))


@router.post("", response_model=StandupEnvelope, status_code=201)
async def create_standup(
    request: StandupCreate,
    current_user: UserORM = Depends(get_current_user),
    standups: StandupService = Depends(get_standup_service),
) -> StandupEnvelope:
    """
    Submit the caller's standup for a day.

    Raises:
        ConflictError: 400 if the caller already submitted for that day
    """
    standup = await standups.create(
        current_user,
        request.date,
        yesterday_work=request.yesterday_work,
        today_plan=request.today_plan,
        blockers=request.blockers,
    )
    return StandupEnvelope(standup=StandupResponse.model_validate(standup))


@router.put("/{standup_id}", response_model=StandupEnvelope)
async def update_standup(
    standup_id: UUID,
    request: StandupUpdate,
    current_user: UserORM = Depends(get_current_user),
    standups: StandupService = Depends(get_standup_service),
) -> StandupEnvelope:
    """
    Update lists of the caller's own standup; omitted lists stay as they are.

    Raises:
        NotFoundError: 404 if the standup does not exist
        PermissionDeniedError: 403 if it belongs to someone else
    """
    standup = await standups.update(
        current_user,
        standup_id,
        yesterday_work=request.yesterday_work,
        today_plan=request.today_plan,
        blockers=request.blockers,
    )
    return StandupEnvelope(standup=StandupResponse.model_validate(standup))


@router.delete("/{standup_id}", response_model=MessageResponse)
async def delete_standup(
    standup_id: UUID,
    current_user: UserORM = Depends(get_current_user),
    standups: StandupService = Depends(get_standup_service),
) -> MessageResponse:
    """Delete the caller's own standup."""
    await standups.delete(current_user, standup_id)
    return MessageResponse(message="Standup deleted successfully")
