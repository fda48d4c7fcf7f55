"""Celery application configuration."""

from celery import Celery
from celery.schedules import crontab

from app.core.config import settings

celery_app = Celery(
    "patrimoine",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=[
        "app.tasks.price_updates",
        "app.tasks.snapshots",
    ],
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes
    worker_prefetch_multiplier=1,
    task_acks_late=True,
)

# Scheduled tasks (Celery Beat)
celery_app.conf.beat_schedule = {
    "refresh-auto-prices": {
        "task": "tasks.refresh_auto_prices",
        "schedule": crontab(hour=22, minute=0),  # Every day at 22:00 UTC, after market close
    },
    # Runs after the price refresh so the snapshot holds the day's closing values
    "create-daily-snapshot": {
        "task": "tasks.create_daily_snapshot",
        "schedule": crontab(hour=22, minute=30),
    },
}
