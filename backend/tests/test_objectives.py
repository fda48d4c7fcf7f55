"""Allocation objective endpoint tests."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_objectives(client: AsyncClient, auth_headers: dict, seeded):
    response = await client.get("/api/v1/objectives/", headers=auth_headers)
    assert response.status_code == 200
    assert len(response.json()) == 9

    response = await client.get("/api/v1/objectives/?category=geo", headers=auth_headers)
    assert {o["key"] for o in response.json()} == {"FR", "US", "EU", "OTHER"}
    assert all(o["target_percent"] == 0.0 for o in response.json())


@pytest.mark.asyncio
async def test_bulk_update(client: AsyncClient, auth_headers: dict, seeded):
    response = await client.put(
        "/api/v1/objectives/bulk",
        json={
            "category": "geo",
            "objectives": [
                {"key": "FR", "target_percent": 40},
                {"key": "US", "target_percent": 33.33},
                {"key": "EU", "target_percent": 26.67},
                {"key": "OTHER", "target_percent": 0},
            ],
        },
        headers=auth_headers,
    )
    assert response.status_code == 200
    targets = {o["key"]: o["target_percent"] for o in response.json()}
    assert targets == {"EU": 26.67, "FR": 40.0, "OTHER": 0.0, "US": 33.33}


@pytest.mark.asyncio
async def test_bulk_update_must_sum_to_100(client: AsyncClient, auth_headers: dict, seeded):
    response = await client.put(
        "/api/v1/objectives/bulk",
        json={
            "category": "type",
            "objectives": [
                {"key": "Stock", "target_percent": 60},
                {"key": "Crypto", "target_percent": 30},
            ],
        },
        headers=auth_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_bulk_update_rejects_duplicate_keys(client: AsyncClient, auth_headers: dict, seeded):
    response = await client.put(
        "/api/v1/objectives/bulk",
        json={
            "category": "geo",
            "objectives": [
                {"key": "NewKey", "target_percent": 50},
                {"key": "NewKey", "target_percent": 50},
            ],
        },
        headers=auth_headers,
    )
    assert response.status_code == 400

    response = await client.get("/api/v1/objectives/?category=geo", headers=auth_headers)
    assert "NewKey" not in {o["key"] for o in response.json()}


@pytest.mark.asyncio
async def test_update_single_objective(client: AsyncClient, auth_headers: dict, seeded):
    objectives = (await client.get("/api/v1/objectives/?category=type", headers=auth_headers)).json()
    stock = next(o for o in objectives if o["key"] == "Stock")

    response = await client.put(
        f"/api/v1/objectives/{stock['id']}", json={"target_percent": 55}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["target_percent"] == 55.0

    response = await client.put(
        f"/api/v1/objectives/{stock['id']}", json={"target_percent": 101}, headers=auth_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_nonexistent_objective(client: AsyncClient, auth_headers: dict):
    response = await client.put(
        "/api/v1/objectives/999", json={"target_percent": 10}, headers=auth_headers
    )
    assert response.status_code == 404
