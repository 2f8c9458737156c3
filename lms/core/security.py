"""JWT helpers. Issuing tokens for real users (login) lives outside this service."""

import uuid
from datetime import datetime, timedelta, timezone

from jose import jwt

from lms.core.config import settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and verify a bearer token. Raises ``jose.JWTError`` when invalid."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
