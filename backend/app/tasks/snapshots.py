"""Daily snapshot task."""

import logging
from datetime import date

from app.core.database import AsyncSessionLocal, engine
from app.services.snapshot_service import snapshot_service
from app.tasks.celery_app import celery_app
from app.tasks.price_updates import run_async

logger = logging.getLogger(__name__)


async def _create_snapshot_async() -> dict:
    try:
        async with AsyncSessionLocal() as db:
            snapshot = await snapshot_service.capture(db, date.today())
            return {
                "date": snapshot.snapshot_date.isoformat(),
                "total_value": snapshot.total_value,
            }
    finally:
        await engine.dispose()


@celery_app.task(name="tasks.create_daily_snapshot")
def create_daily_snapshot() -> dict:
    """Celery task: capture today's snapshot of the whole ledger."""
    return run_async(_create_snapshot_async())
