"""Dashboard metrics computed from the live ledger and the snapshot history."""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.asset import Asset
from app.models.snapshot import Snapshot
from app.services.performance_service import (
    PerformanceMetric,
    Timespan,
    compare_amounts,
    performance_service,
)


def group_amounts(assets: Iterable[Asset]) -> Dict[str, Dict[str, float]]:
    """current_amount summed by type, owner and geography (geo-less assets skipped)."""
    by_type: Dict[str, float] = {}
    by_who: Dict[str, float] = {}
    by_geo: Dict[str, float] = {}
    for asset in assets:
        amount = asset.current_amount or 0.0
        type_key = getattr(asset.asset_type, "value", asset.asset_type)
        by_type[type_key] = by_type.get(type_key, 0.0) + amount
        by_who[asset.who] = by_who.get(asset.who, 0.0) + amount
        if asset.geo:
            geo_key = getattr(asset.geo, "value", asset.geo)
            by_geo[geo_key] = by_geo.get(geo_key, 0.0) + amount
    return {"by_type": by_type, "by_who": by_who, "by_geo": by_geo}


def triggered_alerts(assets: Iterable[Asset]) -> List[Asset]:
    """Assets whose unit price crossed their high or low threshold."""
    return [
        a for a in assets
        if (a.alert_high and a.current_value >= a.alert_high)
        or (a.alert_low and a.current_value <= a.alert_low)
    ]


class MetricsService:
    """Service for dashboard metrics."""

    async def get_dashboard_stats(
        self,
        db: AsyncSession,
        timespan: Timespan = Timespan.ALL,
        metric: PerformanceMetric = PerformanceMetric.PERCENT,
        limit: int = 5,
        today: Optional[date] = None,
    ) -> Dict:
        today = today or date.today()
        assets = (await db.execute(select(Asset).order_by(Asset.id))).scalars().all()

        total_value = sum(a.current_amount or 0.0 for a in assets)
        total_buying_amount = sum(a.buying_amount or 0.0 for a in assets)
        overall = compare_amounts(total_value, total_buying_amount)

        # 30-day change against the snapshot in force 30 days ago
        value_change_30d = None
        percent_change_30d = None
        past = await self._snapshot_total_as_of(db, today - timedelta(days=30))
        if past is not None:
            value_change_30d = total_value - past
            change = compare_amounts(total_value, past)
            percent_change_30d = change.percent if change else None

        ranking = await performance_service.rank_performers(
            db, assets, timespan=timespan, metric=metric, limit=limit, today=today
        )

        return {
            "total_value": total_value,
            "total_buying_amount": total_buying_amount,
            "total_performance": overall.percent if overall else 0.0,
            "value_change_30d": value_change_30d,
            "percent_change_30d": percent_change_30d,
            **group_amounts(assets),
            "timespan": timespan.value,
            "metric": metric.value,
            "top_performers": ranking["top"],
            "worst_performers": ranking["worst"],
            "alerts": triggered_alerts(assets),
            "total_dividends_annual": sum(
                (a.quantity or 0.0) * (a.dividend_per_share or 0.0) for a in assets
            ),
        }

    async def _snapshot_total_as_of(self, db: AsyncSession, target: date) -> Optional[float]:
        # Only the stored total is needed, the payload is not decoded here
        result = await db.execute(
            select(Snapshot.total_value)
            .where(Snapshot.snapshot_date <= target)
            .order_by(Snapshot.snapshot_date.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()


# Singleton instance
metrics_service = MetricsService()
