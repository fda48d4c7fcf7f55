"""Price refresh endpoint tests."""

import httpx
import pytest
from httpx import AsyncClient

from app.api.v1.endpoints import prices
from app.services.price_service import PriceService


def _chart(price, currency="EUR"):
    return {"chart": {"result": [{"meta": {"regularMarketPrice": price, "currency": currency}}]}}


@pytest.fixture
def mock_prices(monkeypatch):
    routes = {
        "AI.PA": _chart(180.0),
        "AAPL": _chart(200.0, currency="USD"),
        "USDEUR=X": _chart(0.9),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        symbol = request.url.path.rsplit("/", 1)[-1]
        if symbol in routes:
            return httpx.Response(200, json=routes[symbol])
        return httpx.Response(404)

    service = PriceService(
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)), use_cache=False
    )
    monkeypatch.setattr(prices, "price_service", service)
    return service


@pytest.mark.asyncio
async def test_refresh_all(client: AsyncClient, auth_headers: dict, sample_assets, mock_prices):
    response = await client.post("/api/v1/prices/refresh", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    # Livret A has no ticker; BTC-EUR is unknown to the provider
    assert data["total"] == 3
    assert data["updated"] == 2

    air, apple, _, bitcoin = sample_assets
    assert air.current_amount == pytest.approx(1800.0)
    assert apple.current_value == pytest.approx(180.0)
    assert apple.current_amount == pytest.approx(900.0)
    assert bitcoin.current_amount == 600.0


@pytest.mark.asyncio
async def test_refresh_one(client: AsyncClient, auth_headers: dict, sample_assets, mock_prices):
    air = sample_assets[0]
    response = await client.post(f"/api/v1/prices/refresh/{air.id}", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["old_value"] == 170.0
    assert data["new_value"] == 180.0
    assert data["new_amount"] == 1800.0


@pytest.mark.asyncio
async def test_refresh_one_errors(client: AsyncClient, auth_headers: dict, sample_assets, mock_prices):
    _, _, livret, bitcoin = sample_assets

    response = await client.post("/api/v1/prices/refresh/999", headers=auth_headers)
    assert response.status_code == 404

    response = await client.post(f"/api/v1/prices/refresh/{livret.id}", headers=auth_headers)
    assert response.status_code == 400

    response = await client.post(f"/api/v1/prices/refresh/{bitcoin.id}", headers=auth_headers)
    assert response.status_code == 502
