"""Dashboard endpoints."""

from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_auth
from app.core.database import get_db
from app.services.metrics_service import metrics_service
from app.services.performance_service import PerformanceMetric, Timespan

router = APIRouter(dependencies=[Depends(require_auth)])


# ============== Pydantic Models ==============

class Performer(BaseModel):
    """One asset's performance over the requested timespan."""
    asset_id: int
    name: str
    asset_type: str
    current_amount: float
    baseline_amount: float
    percent: float
    absolute: float


class PriceAlert(BaseModel):
    """Asset whose unit price crossed one of its thresholds."""
    id: int
    name: str
    ticker: Optional[str] = None
    current_value: float
    alert_high: Optional[float] = None
    alert_low: Optional[float] = None

    class Config:
        from_attributes = True


class DashboardStats(BaseModel):
    total_value: float
    total_buying_amount: float
    total_performance: float
    value_change_30d: Optional[float] = None
    percent_change_30d: Optional[float] = None
    by_type: Dict[str, float]
    by_who: Dict[str, float]
    by_geo: Dict[str, float]
    timespan: str
    metric: str
    top_performers: List[Performer]
    worst_performers: List[Performer]
    alerts: List[PriceAlert]
    total_dividends_annual: float


# ============== Endpoints ==============

@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    timespan: Timespan = Query(Timespan.ALL),
    metric: PerformanceMetric = Query(PerformanceMetric.PERCENT),
    limit: int = Query(5, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
) -> DashboardStats:
    """Totals, breakdowns, best and worst performers and price alerts."""
    stats = await metrics_service.get_dashboard_stats(
        db, timespan=timespan, metric=metric, limit=limit
    )
    stats["top_performers"] = [asdict(e) for e in stats["top_performers"]]
    stats["worst_performers"] = [asdict(e) for e in stats["worst_performers"]]
    stats["alerts"] = [PriceAlert.model_validate(a) for a in stats["alerts"]]
    return DashboardStats(**stats)
