"""API dependencies."""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.security import decode_token, verify_cron_secret

security = HTTPBearer(auto_error=False)


async def require_auth(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Accept the session cookie or a Bearer token."""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token and credentials:
        token = credentials.credentials

    payload = decode_token(token) if token else None
    if payload is None or payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


async def require_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_cron_secret: Optional[str] = Header(None),
) -> None:
    """Scheduled callers authenticate with CRON_SECRET, as Bearer or X-Cron-Secret."""
    secret = credentials.credentials if credentials else x_cron_secret
    if not verify_cron_secret(secret):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid cron secret",
        )
