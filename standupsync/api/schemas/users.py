"""User administration request/response schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from standupsync.api.schemas.common import CamelModel
from standupsync.db.models.user import UserRole


class UserResponse(CamelModel):
    """Public view of a user. Never carries password or token material."""

    id: UUID
    email: str
    name: str
    role: UserRole
    team_id: UUID
    is_active: bool
    is_invited: bool = False
    invited_by: Optional[UUID] = None
    invited_at: Optional[datetime] = None
    slack_user_id: Optional[str] = None
    last_login_at: Optional[datetime] = None
    created_at: datetime


class UserListResponse(CamelModel):
    users: list[UserResponse]


class UserEnvelope(CamelModel):
    user: UserResponse


class InviteRequest(CamelModel):
    """Invite a teammate; ``name`` defaults to the email prefix."""

    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    name: Optional[str] = Field(None, max_length=100)
    role: UserRole = UserRole.USER


class InviteResponse(CamelModel):
    user: UserResponse
    message: str


class RoleUpdate(CamelModel):
    role: UserRole


class StatusUpdate(CamelModel):
    is_active: bool


class SlackLinkUpdate(CamelModel):
    slack_user_id: Optional[str] = Field(None, max_length=64)
