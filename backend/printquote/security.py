"""Password hashing, temporary credentials and session cookie tokens."""
from __future__ import annotations

import random
import re
from datetime import datetime, timezone

import jwt
from passlib.context import CryptContext

# Characters that cannot be confused with each other when read aloud or copied by hand
TEMP_PASSWORD_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
TEMP_PASSWORD_LENGTH = 6
MIN_PASSWORD_LENGTH = 6

TOKEN_ALGORITHM = "HS256"


class PasswordHasher:
    """Thin wrapper over a passlib context so the scheme travels with the app context."""

    def __init__(self, schemes: list[str] | None = None) -> None:
        # PBKDF2-SHA256 avoids bcrypt backend issues
        self._context = CryptContext(
            schemes=schemes or ["pbkdf2_sha256"],
            deprecated="auto",
        )

    def hash(self, password: str) -> str:
        """Hash a password for storage."""
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a plain password against the stored hash."""
        if not password or not password_hash:
            return False
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # unknown or malformed hash format
            return False


def generate_temp_password(rng: random.Random, length: int = TEMP_PASSWORD_LENGTH) -> str:
    """Return a random password over the confusable-free alphabet."""

    return "".join(rng.choice(TEMP_PASSWORD_ALPHABET) for _ in range(length))


def is_strong_enough(password: str | None) -> bool:
    return bool(password) and len(password) >= MIN_PASSWORD_LENGTH


def digits_only(value: str | None) -> str:
    return re.sub(r"\D", "", value or "")


def encode_session_token(session_id: str, expires_at: datetime, secret_key: str) -> str:
    """Sign the opaque session id carried by the cookie."""

    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return jwt.encode(
        {"sid": session_id, "exp": int(expires_at.timestamp())},
        secret_key,
        algorithm=TOKEN_ALGORITHM,
    )


def decode_session_token(token: str, secret_key: str) -> str:
    """Return the session id of a valid token; raises ``jwt.PyJWTError`` otherwise."""

    # expiry is enforced against the session row using the app clock
    payload = jwt.decode(
        token, secret_key, algorithms=[TOKEN_ALGORITHM], options={"verify_exp": False}
    )
    session_id = payload.get("sid")
    if not session_id:
        raise jwt.InvalidTokenError("session id missing")
    return session_id
