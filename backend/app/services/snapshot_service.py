"""Portfolio snapshot service for historical value tracking."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.asset import Asset
from app.models.snapshot import Snapshot
from app.schemas.snapshot import (
    SnapshotAsset,
    SnapshotPayload,
    SnapshotPayloadError,
    decode_payload,
    encode_payload,
)

logger = logging.getLogger(__name__)

# Lookback for the summary endpoint, in days (None = everything)
SUMMARY_RANGES: Dict[str, Optional[int]] = {
    "3m": 91,
    "6m": 182,
    "1y": 365,
    "all": None,
}


@dataclass
class HistoricalSnapshot:
    """A snapshot row together with its decoded payload."""

    snapshot_date: date
    total_value: float
    payload: SnapshotPayload


def build_payload(assets: Iterable[Asset]) -> Tuple[float, SnapshotPayload]:
    """Aggregate the ledger into a snapshot payload.

    Returns the portfolio total and the payload. Geography totals skip
    assets without a geography.
    """
    frozen = [SnapshotAsset.model_validate(asset) for asset in assets]

    total_value = 0.0
    by_type: Dict[str, float] = {}
    by_who: Dict[str, float] = {}
    by_geo: Dict[str, float] = {}

    for asset in frozen:
        amount = asset.current_amount
        total_value += amount
        by_type[asset.asset_type.value] = by_type.get(asset.asset_type.value, 0.0) + amount
        by_who[asset.who] = by_who.get(asset.who, 0.0) + amount
        if asset.geo:
            by_geo[asset.geo.value] = by_geo.get(asset.geo.value, 0.0) + amount

    payload = SnapshotPayload(assets=frozen, by_type=by_type, by_who=by_who, by_geo=by_geo)
    return total_value, payload


def find_asset_in_payload(
    payload: SnapshotPayload, asset_id: int, asset_name: Optional[str] = None
) -> Optional[SnapshotAsset]:
    """Locate an asset inside a snapshot.

    Lookup is by id first. Only when no entry carries that id is the name
    tried, since ids in old snapshots may predate the current ledger.
    """
    for asset in payload.assets:
        if asset.id == asset_id:
            return asset
    if asset_name:
        for asset in payload.assets:
            if asset.name == asset_name:
                return asset
    return None


class SnapshotService:
    """Service for managing daily portfolio snapshots."""

    async def capture(
        self,
        db: AsyncSession,
        as_of: date,
        assets: Optional[Sequence[Asset]] = None,
    ) -> Snapshot:
        """Capture the ledger for ``as_of``, replacing any snapshot of that day.

        Read-then-write with no lock: two concurrent captures for the same
        date end up last-write-wins.
        """
        if assets is None:
            assets = (
                await db.execute(select(Asset).order_by(Asset.id))
            ).scalars().all()
        else:
            assets = sorted(assets, key=lambda a: a.id)

        total_value, payload = build_payload(assets)
        data_json = encode_payload(payload)

        existing = (
            await db.execute(select(Snapshot).where(Snapshot.snapshot_date == as_of))
        ).scalar_one_or_none()

        if existing:
            existing.total_value = total_value
            existing.data_json = data_json
            snapshot = existing
            logger.info(f"Replaced snapshot for {as_of}: total={total_value:.2f}")
        else:
            snapshot = Snapshot(
                snapshot_date=as_of,
                total_value=total_value,
                data_json=data_json,
            )
            db.add(snapshot)
            logger.info(f"Created snapshot for {as_of}: total={total_value:.2f}")

        await db.commit()
        await db.refresh(snapshot)
        return snapshot

    async def list_snapshots(
        self, db: AsyncSession, limit: int = 100, offset: int = 0
    ) -> List[Snapshot]:
        """Snapshots newest first."""
        result = await db.execute(
            select(Snapshot)
            .order_by(Snapshot.snapshot_date.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def _decoded_ascending(self, db: AsyncSession) -> List[HistoricalSnapshot]:
        """Decode snapshots oldest first, skipping (and logging) malformed payloads."""
        rows = (
            await db.execute(select(Snapshot).order_by(Snapshot.snapshot_date.asc()))
        ).scalars().all()

        decoded = []
        for row in rows:
            try:
                payload = decode_payload(row.data_json)
            except SnapshotPayloadError as e:
                logger.warning(f"Skipping snapshot {row.snapshot_date}: malformed payload ({e})")
                continue
            decoded.append(HistoricalSnapshot(row.snapshot_date, row.total_value, payload))
        return decoded

    async def get_asset_history(
        self, db: AsyncSession, asset_id: int, asset_name: Optional[str] = None
    ) -> List[Dict]:
        """Per-snapshot values of one asset, oldest first.

        Dates whose payload is unreadable or that do not contain the asset
        are left out; no gap filling.
        """
        history = []
        for snap in await self._decoded_ascending(db):
            asset = find_asset_in_payload(snap.payload, asset_id, asset_name)
            if asset is None:
                continue
            history.append({
                "date": snap.snapshot_date.isoformat(),
                "unit_value": asset.current_value,
                "quantity": asset.quantity,
                "amount": asset.current_amount,
            })
        return history

    async def find_as_of(
        self, db: AsyncSession, target_date: date
    ) -> Optional[HistoricalSnapshot]:
        """Most recent readable snapshot dated on or before ``target_date``."""
        query = (
            select(Snapshot)
            .where(Snapshot.snapshot_date <= target_date)
            .order_by(Snapshot.snapshot_date.desc())
        )
        for row in (await db.execute(query)).scalars():
            try:
                payload = decode_payload(row.data_json)
            except SnapshotPayloadError as e:
                logger.warning(f"Skipping snapshot {row.snapshot_date}: malformed payload ({e})")
                continue
            return HistoricalSnapshot(row.snapshot_date, row.total_value, payload)
        return None

    async def get_summary(
        self, db: AsyncSession, range_key: str = "all", today: Optional[date] = None
    ) -> Dict:
        """Chart series for a range plus the change across it."""
        if range_key not in SUMMARY_RANGES:
            raise ValueError(f"Unknown range: {range_key}")

        today = today or date.today()
        days = SUMMARY_RANGES[range_key]
        cutoff = today - timedelta(days=days) if days is not None else None

        rows = (
            await db.execute(select(Snapshot).order_by(Snapshot.snapshot_date.asc()))
        ).scalars().all()

        points = []
        for row in rows:
            if cutoff is not None and row.snapshot_date < cutoff:
                continue
            try:
                by_type = {k.value: v for k, v in decode_payload(row.data_json).by_type.items()}
            except SnapshotPayloadError:
                # The total is still usable for the chart
                by_type = {}
            points.append({"date": row.snapshot_date, "total": row.total_value, "by_type": by_type})

        latest_value = rows[-1].total_value if rows else 0.0
        baseline = points[0]["total"] if points else latest_value
        change_value = latest_value - baseline
        change_percent = (change_value / baseline * 100) if baseline > 0 else 0.0

        return {
            "range": range_key,
            "points": points,
            "latest_value": latest_value,
            "change_value": change_value,
            "change_percent": change_percent,
        }


# Singleton instance
snapshot_service = SnapshotService()
