"""Standup request/response schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from standupsync.api.schemas.common import CamelModel
from standupsync.days import UTCDay


class StandupCreate(CamelModel):
    """New standup. ``date`` may be a day or a timestamp; it is reduced to its UTC day."""

    date: Optional[UTCDay] = None
    yesterday_work: list[str] = []
    today_plan: list[str] = []
    blockers: list[str] = []


class StandupUpdate(CamelModel):
    """Partial update; omitted lists are left unchanged."""

    yesterday_work: Optional[list[str]] = None
    today_plan: Optional[list[str]] = None
    blockers: Optional[list[str]] = None


class StandupResponse(CamelModel):
    id: UUID
    user_id: UUID
    team_id: UUID
    date: date
    yesterday_work: list[str]
    today_plan: list[str]
    blockers: list[str]
    submitted_at: datetime
    updated_at: datetime
    slack_message_ts: Optional[str] = None


class StandupListResponse(CamelModel):
    standups: list[StandupResponse]


class StandupEnvelope(CamelModel):
    standup: StandupResponse
