"""Authentication and authorization utilities."""

from standupsync.auth.jwt import (
    TokenExpiredError,
    TokenPayload,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_token,
)
from standupsync.auth.password import (
    generate_temporary_password,
    hash_password,
    validate_password_strength,
    verify_password,
)

__all__ = [
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "generate_temporary_password",
    "hash_password",
    "hash_token",
    "TokenExpiredError",
    "TokenPayload",
    "validate_password_strength",
    "verify_password",
]
