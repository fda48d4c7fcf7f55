"""Snapshot endpoint and reconstruction tests."""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.asset import AssetType, Geography
from app.models.snapshot import Snapshot
from app.schemas.snapshot import decode_payload
from app.services.snapshot_service import snapshot_service


async def _snapshot_rows(db: AsyncSession):
    result = await db.execute(select(Snapshot))
    return result.scalars().all()


@pytest.mark.asyncio
async def test_capture_snapshot(client: AsyncClient, auth_headers: dict, sample_assets):
    """Capturing stores the ledger total and breakdowns."""
    response = await client.post("/api/v1/snapshots/", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["date"] == date.today().isoformat()
    assert data["total_value"] == pytest.approx(8200.0)


@pytest.mark.asyncio
async def test_capture_is_idempotent(
    client: AsyncClient, auth_headers: dict, db_session: AsyncSession, sample_assets
):
    """Two captures on the same day with an unchanged ledger leave one identical row."""
    await client.post("/api/v1/snapshots/", headers=auth_headers)
    first = (await _snapshot_rows(db_session))[0].data_json

    await client.post("/api/v1/snapshots/", headers=auth_headers)
    rows = await _snapshot_rows(db_session)

    assert len(rows) == 1
    assert rows[0].data_json == first
    assert rows[0].total_value == pytest.approx(8200.0)


@pytest.mark.asyncio
async def test_capture_replaces_same_day(db_session: AsyncSession, sample_assets):
    """A later capture on the same date overwrites the earlier one."""
    today = date(2024, 6, 1)
    first = await snapshot_service.capture(db_session, today)

    sample_assets[2].current_amount = 6000.0
    await db_session.commit()
    second = await snapshot_service.capture(db_session, today)

    count = await db_session.execute(
        select(func.count(Snapshot.id)).where(Snapshot.snapshot_date == today)
    )
    assert count.scalar() == 1
    assert second.id == first.id
    assert second.total_value == pytest.approx(9200.0)
    payload = decode_payload(second.data_json)
    assert payload.by_type[AssetType.SAVINGS_ACCOUNT] == pytest.approx(6000.0)


@pytest.mark.asyncio
async def test_capture_payload_breakdowns(db_session: AsyncSession, sample_assets):
    snapshot = await snapshot_service.capture(db_session, date(2024, 6, 1))
    payload = decode_payload(snapshot.data_json)

    assert [a.id for a in payload.assets] == sorted(a.id for a in sample_assets)
    assert payload.by_type == {
        AssetType.STOCK: 2600.0,
        AssetType.SAVINGS_ACCOUNT: 5000.0,
        AssetType.CRYPTO: 600.0,
    }
    assert payload.by_who == {"Person 1": 7300.0, "Person 2": 900.0}
    # Bitcoin has no geography
    assert payload.by_geo == {Geography.FR: 6700.0, Geography.US: 900.0}


@pytest.mark.asyncio
async def test_list_snapshots_newest_first(
    client: AsyncClient, auth_headers: dict, make_snapshot
):
    await make_snapshot(date(2024, 1, 1), 100.0, "{}")
    await make_snapshot(date(2024, 3, 1), 300.0, "{}")
    await make_snapshot(date(2024, 2, 1), 200.0, "{}")

    response = await client.get("/api/v1/snapshots/?limit=2", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert [s["snapshot_date"] for s in data] == ["2024-03-01", "2024-02-01"]

    response = await client.get("/api/v1/snapshots/?limit=2&offset=2", headers=auth_headers)
    assert [s["total_value"] for s in response.json()] == [100.0]


@pytest.mark.asyncio
async def test_asset_history_skips_corrupted_payload(
    client: AsyncClient, auth_headers: dict, sample_assets, make_snapshot, payload_for
):
    """A corrupted snapshot is left out; the other dates are still returned."""
    apple = sample_assets[1]
    await make_snapshot(date(2024, 1, 1), 7000.0, payload_for(sample_assets, {apple.id: 800.0}))
    await make_snapshot(date(2024, 2, 1), 7500.0, "{corrupted")
    await make_snapshot(date(2024, 3, 1), 8200.0, payload_for(sample_assets))

    response = await client.get(f"/api/v1/assets/{apple.id}/history", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert [p["date"] for p in data] == ["2024-01-01", "2024-03-01"]
    assert data[0]["amount"] == 800.0
    assert data[1]["amount"] == 900.0
    assert data[1]["unit_value"] == 180.0
    assert data[1]["quantity"] == 5.0


@pytest.mark.asyncio
async def test_asset_history_falls_back_to_name(
    db_session: AsyncSession, sample_assets, make_snapshot, payload_for
):
    """Old snapshots whose ids predate the ledger are matched by name."""
    apple = sample_assets[1]
    raw = payload_for([apple]).replace(f'"id":{apple.id},', '"id":999,')
    await make_snapshot(date(2023, 12, 1), 900.0, raw)

    history = await snapshot_service.get_asset_history(db_session, apple.id, apple.name)
    assert [p["date"] for p in history] == ["2023-12-01"]

    assert await snapshot_service.get_asset_history(db_session, apple.id) == []


@pytest.mark.asyncio
async def test_asset_history_not_found(client: AsyncClient, auth_headers: dict):
    response = await client.get("/api/v1/assets/999/history", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_find_as_of(db_session: AsyncSession, sample_assets, make_snapshot, payload_for):
    """The most recent readable snapshot on or before the target is used."""
    await make_snapshot(date(2024, 1, 1), 1.0, payload_for(sample_assets))
    await make_snapshot(date(2024, 1, 10), 2.0, "not json")
    await make_snapshot(date(2024, 1, 20), 3.0, payload_for(sample_assets))

    found = await snapshot_service.find_as_of(db_session, date(2024, 1, 15))
    assert found.snapshot_date == date(2024, 1, 1)

    found = await snapshot_service.find_as_of(db_session, date(2024, 1, 20))
    assert found.snapshot_date == date(2024, 1, 20)

    assert await snapshot_service.find_as_of(db_session, date(2023, 12, 31)) is None


@pytest.mark.asyncio
async def test_summary(client: AsyncClient, auth_headers: dict, sample_assets, make_snapshot, payload_for):
    today = date.today()
    await make_snapshot(today - timedelta(days=400), 4000.0, payload_for(sample_assets))
    await make_snapshot(today - timedelta(days=60), 5000.0, "broken")
    await make_snapshot(today, 8200.0, payload_for(sample_assets))

    response = await client.get("/api/v1/snapshots/summary?range=3m", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert len(data["points"]) == 2
    assert data["points"][0]["by_type"] == {}
    assert data["points"][1]["by_type"]["Stock"] == 2600.0
    assert data["latest_value"] == 8200.0
    assert data["change_value"] == pytest.approx(3200.0)
    assert data["change_percent"] == pytest.approx(64.0)

    response = await client.get("/api/v1/snapshots/summary?range=all", headers=auth_headers)
    assert len(response.json()["points"]) == 3


@pytest.mark.asyncio
async def test_summary_invalid_range(client: AsyncClient, auth_headers: dict):
    response = await client.get("/api/v1/snapshots/summary?range=2w", headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_summary_empty(client: AsyncClient, auth_headers: dict):
    response = await client.get("/api/v1/snapshots/summary", headers=auth_headers)
    data = response.json()
    assert data["points"] == []
    assert data["change_percent"] == 0.0
