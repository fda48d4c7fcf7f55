"""Authentication endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from app.core.config import settings
from app.core.rate_limit import limiter, RATE_LIMITS
from app.core.security import create_access_token, verify_app_password

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    password: str = Field(..., min_length=1)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/login", response_model=Token)
@limiter.limit(RATE_LIMITS["auth_login"])
async def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
) -> Token:
    """Log in with the shared password. The token is set as a cookie and returned."""
    if not verify_app_password(login_data.password):
        client_ip = request.client.host if request.client else "unknown"
        logger.warning("Failed login attempt", extra={"client_ip": client_ip})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Mot de passe incorrect",
        )

    token = create_access_token()
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.AUTH_TOKEN_EXPIRE_DAYS * 24 * 3600,
        path="/",
    )
    return Token(access_token=token)


@router.post("/logout")
async def logout(response: Response) -> dict:
    """Clear the session cookie."""
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME, path="/")
    return {"success": True}
