"""Password hashing, strength rules and temporary passwords for invitations."""

import logging
import re
import secrets
import string

import bcrypt

logger = logging.getLogger(__name__)

MIN_LENGTH = 8
ROUNDS = 12
TEMPORARY_PASSWORD_LENGTH = 12

_CHARACTER_RULES = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one digit"),
)


def validate_password_strength(password: str) -> list[str]:
    """
    Check a candidate password against the account rules.

    A password needs at least MIN_LENGTH characters and at least one
    uppercase letter, one lowercase letter and one digit.

    Returns:
        Every rule the password breaks, as messages; empty when it is valid.
    """
    problems: list[str] = []
    if len(password) < MIN_LENGTH:
        problems.append(f"Password must be at least {MIN_LENGTH} characters long")
    problems.extend(message for pattern, message in _CHARACTER_RULES if not pattern.search(password))
    return problems


def hash_password(plain_password: str) -> str:
    """
    bcrypt-hash a password after enforcing the strength rules.

    Raises:
        ValueError: With all broken rules joined by "; ".
    """
    problems = validate_password_strength(plain_password)
    if problems:
        raise ValueError("; ".join(problems))

    digest = bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt(rounds=ROUNDS))
    return digest.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time check of a password against a stored hash.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except (ValueError, TypeError):
        logger.warning("verify_password: stored hash is not a bcrypt hash")
        return False


def generate_temporary_password(length: int = TEMPORARY_PASSWORD_LENGTH) -> str:
    """Random alphanumeric password that satisfies the strength rules.

    Args:
        length: Number of characters, at least MIN_LENGTH.

    Returns:
        A password with at least one uppercase, lowercase and digit character.
    """
    if length < MIN_LENGTH:
        raise ValueError(f"Temporary password length must be at least {MIN_LENGTH}")

    alphabet = string.ascii_letters + string.digits
    while True:
        candidate = "".join(secrets.choice(alphabet) for _ in range(length))
        if not validate_password_strength(candidate):
            return candidate
