"""FastAPI dependencies for authentication and authorization."""

import logging
from typing import Callable, Iterable, Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from standupsync.api.dependencies import get_db
from standupsync.auth.jwt import ACCESS, TokenExpiredError, TokenPayload, decode_token
from standupsync.auth.permissions import has_role
from standupsync.db.models.user import UserORM, UserRole
from standupsync.db.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> UserORM:
    """
    Resolve the bearer token in the Authorization header to an active user.

    Args:
        request: FastAPI request object (team_id is stored on request.state)
        authorization: Authorization header value ("Bearer <jwt>")
        db: Async database session

    Returns:
        The authenticated UserORM.

    Raises:
        HTTPException: 401 if the header is missing or malformed, the token
            has expired, or the user no longer exists
        HTTPException: 403 if the token fails verification or the user is
            deactivated
    """
    if not authorization:
        logger.warning("get_current_user_error: reason=missing_authorization_header")
        raise HTTPException(status_code=401, detail="Access token required")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        logger.warning("get_current_user_error: reason=malformed_authorization_header")
        raise HTTPException(status_code=401, detail="Access token required")

    try:
        payload: TokenPayload = decode_token(parts[1].strip(), ACCESS)
    except TokenExpiredError as e:
        logger.warning("get_current_user_error: reason=token_expired")
        raise HTTPException(status_code=401, detail=str(e)) from e
    except ValueError as e:
        logger.warning(f"get_current_user_error: reason=jwt_decode_failed, error={str(e)}")
        raise HTTPException(status_code=403, detail="Invalid or expired token") from e

    user = await UserRepository(db).get_by_id(payload.sub)
    if user is None:
        logger.warning(f"get_current_user_error: reason=user_not_found, user_id={payload.sub}")
        raise HTTPException(status_code=401, detail="User not found")

    if not user.is_active:
        logger.warning(f"get_current_user_error: reason=user_inactive, user_id={user.id}")
        raise HTTPException(status_code=403, detail="User account is inactive")

    request.state.user_id = user.id
    request.state.team_id = user.team_id
    logger.debug(f"get_current_user_success: user_id={user.id}, team_id={user.team_id}")
    return user


def require_roles(roles: Iterable[str]) -> Callable:
    """
    Factory for a dependency admitting any authenticated user whose role is in ``roles``.

    Args:
        roles: Allowed role names ("admin", "user")

    Returns:
        FastAPI dependency returning the authenticated UserORM

    Example:
        >>> @router.get("/team")
        >>> async def team(user: UserORM = Depends(require_roles(["admin", "user"]))):
        >>>     ...
    """
    allowed = tuple(UserRole(r).value for r in roles)

    async def role_checker(current_user: UserORM = Depends(get_current_user)) -> UserORM:
        if not has_role(current_user, allowed):
            logger.warning(
                f"require_role_denied: user_id={current_user.id}, role={current_user.role}, "
                f"allowed={','.join(allowed)}"
            )
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return current_user

    return role_checker


def require_role(role: str) -> Callable:
    """Factory for a dependency admitting exactly one role."""
    return require_roles([role])


require_admin = require_role(UserRole.ADMIN.value)
