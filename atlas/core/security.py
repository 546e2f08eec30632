"""Password hashing and JWT creation/verification for session tokens."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from atlas.core.config import settings

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


def normalize_username(username: str) -> str:
    """
    Stored and lookup form of a username: surrounding whitespace removed.

    Raises ValueError when the result is empty or too long.
    """
    normalized = username.strip()
    if not (USERNAME_MIN_LEN <= len(normalized) <= USERNAME_MAX_LEN):
        raise ValueError("Invalid username length.")
    return normalized


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.

    A malformed stored hash is reported as a mismatch, never as an error.
    """
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def token_lifetime() -> timedelta:
    """Validity window of an issued session token."""
    return timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(sub: str | int, now: datetime | None = None) -> str:
    """Create a signed JWT session token with sub (user id), iat and exp."""
    issued_at = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "iat": issued_at,
        "exp": issued_at + token_lifetime(),
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
