"""JWT access and refresh token management.

Access and refresh tokens are signed with different secrets, so a refresh
token presented as a bearer credential fails verification outright.
"""

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID, uuid4

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from standupsync.settings import Settings, load_settings

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


class TokenExpiredError(ValueError):
    """Raised when a well-formed token is past its ``exp`` claim."""


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload."""

    sub: UUID
    team_id: Optional[UUID]
    role: Optional[str]
    exp: datetime
    token_type: str


def _secret_for(token_type: str, settings: Settings) -> str:
    secret = settings.jwt_secret_key if token_type == ACCESS else settings.jwt_refresh_secret_key
    if not secret:
        name = "jwt_secret_key" if token_type == ACCESS else "jwt_refresh_secret_key"
        raise ValueError(f"{name} must be configured in settings")
    return secret


def create_access_token(user_id: UUID, team_id: UUID, role: str) -> str:
    """
    Create a JWT access token for an authenticated user.

    Args:
        user_id: User UUID to encode in token
        team_id: Team UUID for scoping access
        role: User's role in the team

    Returns:
        Signed JWT access token string

    Raises:
        ValueError: If jwt_secret_key is not configured
    """
    settings = load_settings()
    secret = _secret_for(ACCESS, settings)

    exp = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_access_token_expire_minutes)
    payload = {
        "sub": str(user_id),
        "team_id": str(team_id),
        "role": role,
        "exp": exp,
        "type": ACCESS,
    }

    token: str = jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)
    logger.info(f"access_token_created: user_id={user_id}, team_id={team_id}, role={role}")
    return token


def create_refresh_token(user_id: UUID) -> str:
    """
    Create a JWT refresh token for token renewal.

    Args:
        user_id: User UUID to encode in token

    Returns:
        Signed JWT refresh token string

    Raises:
        ValueError: If jwt_refresh_secret_key is not configured
    """
    settings = load_settings()
    secret = _secret_for(REFRESH, settings)

    exp = datetime.now(timezone.utc) + timedelta(days=settings.jwt_refresh_token_expire_days)
    # jti keeps two tokens issued within the same second distinct
    payload = {
        "sub": str(user_id),
        "exp": exp,
        "type": REFRESH,
        "jti": uuid4().hex,
    }

    token: str = jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)
    logger.info(f"refresh_token_created: user_id={user_id}")
    return token


def decode_token(token: str, token_type: str = ACCESS) -> TokenPayload:
    """
    Decode and validate a JWT token of the given type.

    Args:
        token: JWT token string to decode
        token_type: Expected type, "access" or "refresh"; selects the secret

    Returns:
        TokenPayload with decoded user_id, team_id, role, expiry, and token_type

    Raises:
        TokenExpiredError: If the token is well-formed but expired
        ValueError: If the token is invalid, malformed, or of the wrong type
    """
    settings = load_settings()
    secret = _secret_for(token_type, settings)

    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])

        if payload.get("type") != token_type:
            raise ValueError(f"wrong token type {payload.get('type')}")

        user_id = UUID(payload["sub"])
        exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        team_id = UUID(payload["team_id"]) if "team_id" in payload else None

        return TokenPayload(
            sub=user_id,
            team_id=team_id,
            role=payload.get("role"),
            exp=exp,
            token_type=token_type,
        )
    except ExpiredSignatureError as e:
        logger.warning(f"token_expired: type={token_type}")
        raise TokenExpiredError("Token has expired") from e
    except JWTError as e:
        logger.warning(f"token_invalid: type={token_type}, error={str(e)}")
        raise ValueError("Invalid token") from e
    except (KeyError, ValueError) as e:
        logger.warning(f"token_parse_error: type={token_type}, error={str(e)}")
        raise ValueError("Invalid token") from e


def hash_token(token: str) -> str:
    """SHA-256 digest of a token, the form in which refresh tokens are stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
