"""Password hashing and JWT helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from speakup.config.settings import settings
from speakup.models.user import User

_SALT_BYTES = 16
_ITERATIONS = 120_000


def _derive(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _ITERATIONS)


def hash_password(password: str) -> str:
    """Return ``base64(salt + pbkdf2_sha256(password))``."""

    salt = os.urandom(_SALT_BYTES)
    return base64.b64encode(salt + _derive(password, salt)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        decoded = base64.b64decode(hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False

    salt, stored = decoded[:_SALT_BYTES], decoded[_SALT_BYTES:]
    return hmac.compare_digest(_derive(password, salt), stored)


class AuthenticationError(Exception):
    """Raised when a bearer token cannot be decoded or is otherwise invalid."""


class TokenPayload(BaseModel):
    sub: str
    exp: datetime
    user: dict[str, Any] | None = None
    iat: datetime | None = None


def create_access_token(
    subject: str,
    user: User | None = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign an access token for ``subject`` (the user id as a string)."""

    now = datetime.now(timezone.utc)
    expire_at = now + (
        expires_delta
        or timedelta(minutes=settings.security.access_token_expires_minutes)
    )
    claims: dict[str, Any] = {"sub": subject, "exp": expire_at, "iat": now}
    if user is not None:
        claims["user"] = {"id": user.id, "name": user.name, "email": user.email}

    return jwt.encode(
        claims,
        settings.security.jwt_secret_key.get_secret_value(),
        algorithm=settings.security.jwt_algorithm,
    )


def decode_access_token(token: str) -> TokenPayload:
    try:
        payload = jwt.decode(
            token,
            settings.security.jwt_secret_key.get_secret_value(),
            algorithms=[settings.security.jwt_algorithm],
        )
        return TokenPayload.model_validate(payload)
    except (JWTError, ValidationError) as exc:
        raise AuthenticationError("Invalid authentication token") from exc


__all__ = [
    "AuthenticationError",
    "TokenPayload",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
]
