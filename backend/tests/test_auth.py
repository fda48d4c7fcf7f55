"""Authentication endpoint tests."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.core.security import create_access_token


@pytest.mark.asyncio
async def test_login_success_sets_cookie(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={"password": "test-password"})
    assert response.status_code == 200
    assert response.json()["access_token"]
    assert settings.AUTH_COOKIE_NAME in response.cookies

    # The cookie alone authenticates later requests
    response = await client.get("/api/v1/assets/")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={"password": "nope"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_rate_limited(client: AsyncClient):
    for _ in range(5):
        await client.post("/api/v1/auth/login", json={"password": "nope"})
    response = await client.post("/api/v1/auth/login", json={"password": "nope"})
    assert response.status_code == 429


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient):
    await client.post("/api/v1/auth/login", json={"password": "test-password"})
    response = await client.post("/api/v1/auth/logout")
    assert response.status_code == 200

    response = await client.get("/api/v1/assets/")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token(client: AsyncClient):
    response = await client.get(
        "/api/v1/assets/", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_expired_token(client: AsyncClient):
    token = create_access_token(expires_delta=timedelta(seconds=-1))
    response = await client.get("/api/v1/assets/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
