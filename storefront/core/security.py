# storefront/core/security.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import jwt, JWTError

from storefront.core.config import get_settings
from storefront.core.exceptions import AuthenticationError

settings = get_settings()


def hash_password(password: str) -> str:
    """Return a bcrypt hash (salt embedded) as text for storage."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


def create_access_token(
    user_id: uuid.UUID,
    role: str,
    expires_minutes: int | None = None,
) -> str:
    """
    Sign an access token.

    Claims:
      - sub: user id (UUID string)
      - role: admin | seller | customer
      - exp: expiry (ACCESS_TOKEN_EXPIRE_MINUTES by default)
    """
    minutes = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an access token (signature + exp).

    Raises:
        AuthenticationError: if token is invalid/expired.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")
