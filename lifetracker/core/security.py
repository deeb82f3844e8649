"""Account passwords (bcrypt) and the bearer tokens handed out by POST /api/login."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from lifetracker.core.config import settings

BCRYPT_ROUNDS = 12

# Applied when the boot admin or the create_user script adds an account.
# POST /api/login does not enforce these, so a too-short password is just a failed login.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# bcrypt ignores input past 72 bytes.
_BCRYPT_INPUT_LIMIT = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_INPUT_LIMIT]


def hash_password(plain_password: str) -> str:
    """Hash for the passwordHash field of users.json."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """False for a wrong password and for a stored hash bcrypt cannot parse."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(user_id: str, username: str, role: str) -> str:
    """Signed token for a logged-in user, valid for JWT_EXPIRE_MINUTES."""
    issued_at = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": user_id,
        "username": username,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.JWT_SECRET.get_secret_value(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises jwt.PyJWTError for a tampered, expired or otherwise unusable token.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
    )
