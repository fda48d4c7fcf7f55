"""Security utilities: shared-password login, JWT, cron secret."""

import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from app.core.config import settings


def verify_app_password(password: str) -> bool:
    """Compare a submitted password against the configured one."""
    if not settings.AUTH_PASSWORD:
        return False
    return hmac.compare_digest(
        password.encode("utf-8"), settings.AUTH_PASSWORD.encode("utf-8")
    )


def verify_cron_secret(secret: Optional[str]) -> bool:
    """Check a cron caller's secret. An unset CRON_SECRET rejects everything."""
    if not settings.CRON_SECRET or not secret:
        return False
    return hmac.compare_digest(
        secret.encode("utf-8"), settings.CRON_SECRET.encode("utf-8")
    )


# JWT tokens
def create_access_token(expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT session token."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            days=settings.AUTH_TOKEN_EXPIRE_DAYS
        )

    to_encode = {
        "sub": "owner",
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        return payload
    except JWTError:
        return None
