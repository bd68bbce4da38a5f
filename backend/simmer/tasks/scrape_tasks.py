"""Scrape orchestration tasks."""

import logging
from dataclasses import asdict

from simmer.tasks.celery_app import celery_app
from simmer.models.session import SyncSessionLocal
from simmer.scraper.recipe_scraper import scrape_recipe
from simmer.services.discovery import discover_urls
from simmer.services.scrape_queue import process_batch

logger = logging.getLogger(__name__)


@celery_app.task(name="simmer.tasks.scrape_tasks.discover_recipe_urls")
def discover_recipe_urls():
    """Walk every enabled domain's sitemap and queue new recipe URLs."""
    db = SyncSessionLocal()
    try:
        result = discover_urls(db)
        logger.info(f"Discovery: {result.urls_added} URLs added across {result.domains_processed} domains")
        return asdict(result)
    finally:
        db.close()


@celery_app.task(name="simmer.tasks.scrape_tasks.process_scrape_queue")
def process_scrape_queue(batch_size: int | None = None):
    """Scrape the next batch of due queue items."""
    db = SyncSessionLocal()
    try:
        result = process_batch(db, batch_size=batch_size)
        return asdict(result)
    finally:
        db.close()


@celery_app.task(name="simmer.tasks.scrape_tasks.scrape_url")
def scrape_url(url: str):
    """Scrape a single URL outside the queue."""
    db = SyncSessionLocal()
    try:
        result = scrape_recipe(url, db)
        if not result.success:
            logger.error(f"Failed to scrape {url}: {result.error}")
        return {
            "success": result.success,
            "url": result.url,
            "recipe_id": str(result.recipe_id) if result.recipe_id else None,
            "error": result.error,
        }
    finally:
        db.close()
