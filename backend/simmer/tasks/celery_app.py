"""Celery application configuration and beat schedule."""

from celery import Celery
from celery.schedules import crontab

from simmer.config import get_settings

settings = get_settings()

celery_app = Celery(
    "simmer",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "simmer.tasks.scrape_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    task_track_started=True,
    task_time_limit=900,
    task_soft_time_limit=840,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
)

celery_app.conf.beat_schedule = {
    "discover-recipe-urls": {
        "task": "simmer.tasks.scrape_tasks.discover_recipe_urls",
        "schedule": crontab(minute=0, hour=3),
    },
    "process-scrape-queue": {
        "task": "simmer.tasks.scrape_tasks.process_scrape_queue",
        "schedule": crontab(minute="*/5"),
    },
}
