"""Authentication request/response schemas."""

from typing import Optional

from pydantic import Field

from standupsync.api.schemas.common import CamelModel
from standupsync.api.schemas.users import UserResponse


class RegisterRequest(CamelModel):
    """Self-registration. The new user becomes the admin of a new team.

    Args:
        email: Valid email address
        password: Password meeting the strength rules
        name: Display name, defaults to the email prefix
    """

    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=8)
    name: Optional[str] = Field(None, max_length=100)


class LoginRequest(CamelModel):
    """Credentials; empty values are reported as a 400 by the handler."""

    email: Optional[str] = None
    password: Optional[str] = None


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = None


class AuthResponse(CamelModel):
    """User plus a fresh token pair."""

    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
