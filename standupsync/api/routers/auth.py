"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from standupsync.api.dependencies import get_user_service
from standupsync.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
)
from standupsync.api.schemas.common import MessageResponse
from standupsync.api.schemas.users import UserEnvelope, UserResponse
from standupsync.auth.dependencies import get_current_user
from standupsync.auth.jwt import (
    REFRESH,
    TokenExpiredError,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_token,
)
from standupsync.db.models.user import UserORM
from standupsync.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


async def _issue_tokens(users: UserService, user: UserORM) -> TokenPair:
    """Mint a token pair and remember the refresh token for rotation checks."""
    access_token = create_access_token(user.id, user.team_id, user.role.value)
    refresh_token = create_refresh_token(user.id)
    await users.set_refresh_token(user, refresh_token)
    return TokenPair(access_token=access_token, refresh_token=refresh_token)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    request: RegisterRequest,
    users: UserService = Depends(get_user_service),
) -> AuthResponse:
    """
    Register a new account.

    The new user becomes the admin and owner of a freshly created team.

    Raises:
        ConflictError: 400 if the email is already registered
        InvalidRequestError: 400 if the password is too weak
    """
    user = await users.create(email=request.email, password=request.password, name=request.name)
    tokens = await _issue_tokens(users, user)

    logger.info(f"register_success: user_id={user.id}, team_id={user.team_id}")
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    users: UserService = Depends(get_user_service),
) -> AuthResponse:
    """
    Authenticate with email and password and return a token pair.

    Raises:
        InvalidRequestError: 400 if a field is missing or credentials are wrong
        PermissionDeniedError: 403 if the account is deactivated
    """
    user = await users.authenticate(request.email or "", request.password or "")
    tokens = await _issue_tokens(users, user)

    logger.info(f"login_success: user_id={user.id}")
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/refresh", response_model=TokenPair)
async def refresh(
    request: RefreshRequest,
    users: UserService = Depends(get_user_service),
) -> TokenPair:
    """
    Exchange the current refresh token for a new token pair.

    The presented token must be the one most recently issued to the user;
    both tokens are rotated.

    Raises:
        HTTPException: 401 if no refresh token is given
        HTTPException: 403 if the token is invalid, expired, or superseded
    """
    token = request.refresh_token
    if not token:
        raise HTTPException(status_code=401, detail="Refresh token required")

    try:
        payload = decode_token(token, REFRESH)
    except TokenExpiredError as e:
        raise HTTPException(status_code=403, detail="Refresh token has expired") from e
    except ValueError as e:
        raise HTTPException(status_code=403, detail="Invalid refresh token") from e

    user = await users.get_by_id_or_none(payload.sub)
    if user is None:
        logger.warning(f"refresh_error: reason=user_not_found, user_id={payload.sub}")
        raise HTTPException(status_code=403, detail="User not found")

    if user.refresh_token_hash != hash_token(token):
        logger.warning(f"refresh_error: reason=token_mismatch, user_id={user.id}")
        raise HTTPException(status_code=403, detail="Invalid refresh token")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is inactive")

    logger.info(f"refresh_success: user_id={user.id}")
    return await _issue_tokens(users, user)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: UserORM = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Invalidate the stored refresh token."""
    await users.set_refresh_token(current_user, None)
    logger.info(f"logout_success: user_id={current_user.id}")
    return MessageResponse(message="User logged out successfully")


@router.get("/me", response_model=UserEnvelope)
async def me(current_user: UserORM = Depends(get_current_user)) -> UserEnvelope:
    """Return the authenticated user."""
    return UserEnvelope(user=UserResponse.model_validate(current_user))
