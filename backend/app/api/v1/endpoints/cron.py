"""Endpoints for external schedulers, authenticated with CRON_SECRET."""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_cron_secret
from app.core.database import get_db
from app.services.price_service import price_service
from app.services.snapshot_service import snapshot_service

router = APIRouter(dependencies=[Depends(require_cron_secret)])


@router.api_route("/refresh-prices", methods=["GET", "POST"])
async def cron_refresh_prices(db: AsyncSession = Depends(get_db)) -> dict:
    """Refresh assets flagged for automatic refresh."""
    result = await price_service.refresh_prices(db, auto_only=True)
    if result["total"]:
        result["message"] = "Prices refreshed via cron"
    return result


@router.api_route("/create-snapshot", methods=["GET", "POST"])
async def cron_create_snapshot(db: AsyncSession = Depends(get_db)) -> dict:
    """Capture today's snapshot."""
    snapshot = await snapshot_service.capture(db, date.today())
    return {
        "success": True,
        "message": "Snapshot created via cron",
        "date": snapshot.snapshot_date.isoformat(),
        "total_value": snapshot.total_value,
    }
