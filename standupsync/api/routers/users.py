"""User administration endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from standupsync.api.dependencies import get_user_service
from standupsync.api.schemas.common import MessageResponse
from standupsync.api.schemas.users import (
    InviteRequest,
    InviteResponse,
    RoleUpdate,
    SlackLinkUpdate,
    StatusUpdate,
    UserEnvelope,
    UserListResponse,
    UserResponse,
)
from standupsync.auth.dependencies import get_current_user, require_admin
from standupsync.db.models.user import UserORM
from standupsync.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def _listing(users: list[UserORM]) -> UserListResponse:
    return UserListResponse(users=[UserResponse.model_validate(u) for u in users])


def _envelope(user: UserORM) -> UserEnvelope:
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.get("", response_model=UserListResponse)
async def list_users(
    current_user: UserORM = Depends(require_admin),
    users: UserService = Depends(get_user_service),
) -> UserListResponse:
    """List every account across all teams. Admin only."""
    return _listing(await users.list_all())


@router.get("/team", response_model=UserListResponse)
async def list_team_members(
    current_user: UserORM = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> UserListResponse:
    """List the caller's teammates, newest first."""
    return _listing(await users.list_team(current_user.team_id))


@router.get("/me", response_model=UserEnvelope)
async def get_me(current_user: UserORM = Depends(get_current_user)) -> UserEnvelope:
    return _envelope(current_user)


@router.post("/invite", response_model=InviteResponse, status_code=201)
async def invite_user(
    request: InviteRequest,
    current_user: UserORM = Depends(require_admin),
    users: UserService = Depends(get_user_service),
) -> InviteResponse:
    """
    Invite a teammate with a generated temporary password.

    The invitation email is best-effort; the account exists even if it fails.

    Raises:
        ConflictError: 400 if the email is already registered
    """
    user, _ = await users.invite(
        current_user, email=request.email, name=request.name, role=request.role.value
    )
    return InviteResponse(
        user=UserResponse.model_validate(user),
        message="User invited successfully. An invitation email has been sent.",
    )


@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(
    user_id: UUID,
    current_user: UserORM = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> UserEnvelope:
    """Fetch a teammate. 404 if missing, 403 if in another team."""
    return _envelope(await users.get_in_team(current_user, user_id))


@router.put("/{user_id}/role", response_model=UserEnvelope)
async def update_user_role(
    user_id: UUID,
    request: RoleUpdate,
    current_user: UserORM = Depends(require_admin),
    users: UserService = Depends(get_user_service),
) -> UserEnvelope:
    """Change a teammate's role. Admins cannot change their own role or the owner's."""
    return _envelope(await users.update_role(current_user, user_id, request.role.value))


@router.put("/{user_id}/status", response_model=UserEnvelope)
async def update_user_status(
    user_id: UUID,
    request: StatusUpdate,
    current_user: UserORM = Depends(require_admin),
    users: UserService = Depends(get_user_service),
) -> UserEnvelope:
    """Activate or deactivate a teammate."""
    return _envelope(await users.set_active(current_user, user_id, request.is_active))


@router.put("/{user_id}/slack", response_model=UserEnvelope)
async def update_user_slack_id(
    user_id: UUID,
    request: SlackLinkUpdate,
    current_user: UserORM = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> UserEnvelope:
    """Link a Slack account. Allowed for the user themselves or a team admin."""
    return _envelope(await users.set_slack_user_id(current_user, user_id, request.slack_user_id))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    current_user: UserORM = Depends(require_admin),
    users: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Delete a teammate together with their standups."""
    await users.delete(current_user, user_id)
    return MessageResponse(message="User deleted successfully")
