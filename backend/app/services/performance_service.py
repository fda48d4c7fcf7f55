"""Per-asset performance over a lookback window, reconstructed from snapshots."""

import enum
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.asset import Asset
from app.schemas.snapshot import SnapshotPayload
from app.services.snapshot_service import snapshot_service

logger = logging.getLogger(__name__)


class Timespan(str, enum.Enum):
    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    YEAR = "1y"
    ALL = "all"


class PerformanceMetric(str, enum.Enum):
    PERCENT = "percent"
    ABSOLUTE = "absolute"


# Lookback in days; ALL compares against cost basis instead of a snapshot
TIMESPAN_DAYS: Dict[Timespan, Optional[int]] = {
    Timespan.WEEK: 7,
    Timespan.MONTH: 30,
    Timespan.QUARTER: 90,
    Timespan.YEAR: 365,
    Timespan.ALL: None,
}


@dataclass
class PerformanceResult:
    percent: float
    absolute: float


@dataclass
class PerformanceEntry:
    asset_id: int
    name: str
    asset_type: str
    current_amount: float
    baseline_amount: float
    percent: float
    absolute: float


def compare_amounts(current: float, baseline: float) -> Optional[PerformanceResult]:
    """Change from ``baseline`` to ``current``; None when the baseline is zero."""
    if not baseline:
        return None
    absolute = current - baseline
    return PerformanceResult(percent=absolute / baseline * 100, absolute=absolute)


def compute_time_based_performance(
    asset: Asset, historical: Optional[SnapshotPayload]
) -> Optional[PerformanceResult]:
    """Compare an asset with its own state inside a historical snapshot.

    The historical entry is matched by id only. None when there is no
    snapshot, the asset is absent from it, or it was worth zero then.
    """
    if historical is None:
        return None
    past = next((a for a in historical.assets if a.id == asset.id), None)
    if past is None:
        return None
    return compare_amounts(asset.current_amount or 0.0, past.current_amount)


def compute_all_time_performance(asset: Asset) -> Optional[PerformanceResult]:
    """Compare an asset with its cost basis."""
    return compare_amounts(asset.current_amount or 0.0, asset.buying_amount or 0.0)


def rank_entries(
    entries: Sequence[PerformanceEntry],
    metric: PerformanceMetric = PerformanceMetric.PERCENT,
    limit: int = 5,
) -> Dict[str, List[PerformanceEntry]]:
    """Best and worst performers by ``metric``.

    Both lists are sorted independently; ``worst[0]`` is the single worst entry.
    """
    key = (lambda e: e.percent) if metric == PerformanceMetric.PERCENT else (lambda e: e.absolute)
    return {
        "top": sorted(entries, key=key, reverse=True)[:limit],
        "worst": sorted(entries, key=key)[:limit],
    }


class PerformanceService:
    """Ranks current holdings against a lookback baseline."""

    async def get_performance_entries(
        self,
        db: AsyncSession,
        assets: Sequence[Asset],
        timespan: Timespan = Timespan.ALL,
        today: Optional[date] = None,
    ) -> List[PerformanceEntry]:
        """Entries for every asset with a defined comparison."""
        days = TIMESPAN_DAYS[timespan]
        historical: Optional[SnapshotPayload] = None
        if days is not None:
            target = (today or date.today()) - timedelta(days=days)
            snap = await snapshot_service.find_as_of(db, target)
            if snap is None:
                logger.debug(f"No snapshot on or before {target}; no {timespan.value} ranking")
                return []
            historical = snap.payload

        entries = []
        for asset in assets:
            if days is None:
                result = compute_all_time_performance(asset)
            else:
                result = compute_time_based_performance(asset, historical)
            if result is None:
                continue
            current = asset.current_amount or 0.0
            entries.append(
                PerformanceEntry(
                    asset_id=asset.id,
                    name=asset.name,
                    asset_type=getattr(asset.asset_type, "value", asset.asset_type),
                    current_amount=current,
                    baseline_amount=current - result.absolute,
                    percent=result.percent,
                    absolute=result.absolute,
                )
            )
        return entries

    async def rank_performers(
        self,
        db: AsyncSession,
        assets: Sequence[Asset],
        timespan: Timespan = Timespan.ALL,
        metric: PerformanceMetric = PerformanceMetric.PERCENT,
        limit: int = 5,
        today: Optional[date] = None,
    ) -> Dict[str, List[PerformanceEntry]]:
        entries = await self.get_performance_entries(db, assets, timespan, today)
        return rank_entries(entries, metric, limit)


# Singleton instance
performance_service = PerformanceService()
