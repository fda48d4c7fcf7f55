"""Price update tasks."""

import asyncio
import logging

from app.core.database import AsyncSessionLocal, engine
from app.services.price_service import PriceService
from app.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


def run_async(coro):
    """Run an async coroutine from sync Celery task."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def _refresh_prices_async(auto_only: bool) -> dict:
    # Fresh client per task: an httpx client cannot outlive its event loop
    service = PriceService()
    try:
        async with AsyncSessionLocal() as db:
            result = await service.refresh_prices(db, auto_only=auto_only)
    finally:
        await service.close()
        await engine.dispose()

    logger.info(f"Price refresh done: {result['updated']}/{result['total']} assets updated")
    return result


@celery_app.task(name="tasks.refresh_auto_prices")
def refresh_auto_prices() -> dict:
    """Celery task: refresh assets flagged for automatic refresh."""
    return run_async(_refresh_prices_async(auto_only=True))


@celery_app.task(name="tasks.refresh_all_prices")
def refresh_all_prices() -> dict:
    """Celery task: refresh every asset that has a ticker (on-demand)."""
    return run_async(_refresh_prices_async(auto_only=False))
