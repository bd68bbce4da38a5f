"""Scrape queue processing, manual seeding and stats."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from simmer.config import get_settings
from simmer.models.base import utcnow
from simmer.models.recipe import Recipe
from simmer.models.scrape_domain import ScrapeDomain
from simmer.models.scrape_queue import QUEUE_STATUSES, ScrapeQueueItem
from simmer.schemas.scrape_queue import validate_http_url
from simmer.scraper.recipe_scraper import ScrapeResult, domain_from_url, scrape_recipe

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class BatchResult:
    success: bool = True
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[dict] = field(default_factory=list)
    error: str | None = None


@dataclass
class EnqueueResult:
    added: int = 0
    skipped: int = 0
    invalid: list[str] = field(default_factory=list)


def backoff_minutes(attempts: int) -> int:
    """Retry delay after the given number of attempts: 5, 15, 45, ... minutes."""
    return settings.queue_backoff_base_minutes * settings.queue_backoff_factor ** max(0, attempts - 1)


def select_due_items(db: Session, now: datetime, limit: int) -> list[ScrapeQueueItem]:
    """Pending items whose time has come, highest priority then oldest first."""
    return db.query(ScrapeQueueItem).filter(
        ScrapeQueueItem.status == "pending",
        ScrapeQueueItem.scheduled_for <= now,
        ScrapeQueueItem.attempts < ScrapeQueueItem.max_attempts,
    ).order_by(
        ScrapeQueueItem.priority.desc(),
        ScrapeQueueItem.scheduled_for.asc(),
    ).limit(limit).all()


def process_batch(
    db: Session,
    batch_size: int | None = None,
    scrape: Callable[[str, Session], ScrapeResult] = scrape_recipe,
    clock: Callable[[], datetime] = utcnow,
) -> BatchResult:
    """Scrape up to ``batch_size`` due queue items, one after another.

    Each item is marked processing (and its attempt counted) before the
    network call. A failure on one item never stops the rest of the batch.
    """
    batch_size = batch_size or settings.scrape_batch_size
    result = BatchResult()

    try:
        items = select_due_items(db, clock(), batch_size)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to fetch queue: {e}")
        return BatchResult(success=False, error=f"Failed to fetch queue: {e}")

    if not items:
        logger.info("No items in queue")
        return result

    for item in items:
        url, domain, item_id = item.url, item.domain, item.id
        result.processed += 1

        try:
            item.status = "processing"
            item.attempts += 1
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            _record_write_failure(result, url, domain, e)
            continue

        scrape_result = scrape(url, db)
        now = clock()

        try:
            # The scrape may have rolled the session back; reload the row
            item = db.get(ScrapeQueueItem, item_id)
            status = _apply_outcome(db, item, scrape_result, now)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            _record_write_failure(result, url, domain, e)
            _release_item(db, item_id, f"Failed to record outcome: {e}", now)
            continue

        if scrape_result.success:
            result.succeeded += 1
        else:
            result.failed += 1
            result.errors.append({"url": url, "error": scrape_result.error or "Unknown error"})
            if status == "skipped":
                result.skipped += 1

    logger.info(
        f"Batch finished: {result.processed} processed, {result.succeeded} succeeded, {result.failed} failed"
    )
    return result


def _apply_outcome(db: Session, item: ScrapeQueueItem, scrape_result: ScrapeResult, now: datetime) -> str:
    """Set the item's next state from the scrape outcome. Returns the new status."""
    if scrape_result.success:
        item.status = "completed"
        item.completed_at = now
        item.last_error = None
        _record_domain_outcome(db, item.domain, now, success=True)
        return item.status

    error = scrape_result.error or "Unknown error"
    item.last_error = error[:2000]

    if scrape_result.error_kind == "content" and settings.skip_content_errors:
        item.status = "skipped"
    else:
        _schedule_retry(item, now)

    _record_domain_outcome(db, item.domain, now, success=False)
    logger.warning(f"[{item.domain}] {item.url} -> {item.status} after attempt {item.attempts}: {error}")
    return item.status


def _schedule_retry(item: ScrapeQueueItem, now: datetime) -> None:
    if item.attempts >= item.max_attempts:
        item.status = "failed"
    else:
        item.status = "pending"
        item.scheduled_for = now + timedelta(minutes=backoff_minutes(item.attempts))


def _record_write_failure(result: BatchResult, url: str, domain: str, error: Exception) -> None:
    logger.error(f"[{domain}] Failed to update queue item for {url}: {error}")
    result.failed += 1
    result.errors.append({"url": url, "error": f"Failed to update queue item: {error}"})


def _release_item(db: Session, item_id: uuid.UUID, error: str, now: datetime) -> None:
    """Move an item out of processing after its outcome could not be written."""
    try:
        item = db.get(ScrapeQueueItem, item_id)
        if item is None or item.status != "processing":
            return
        item.last_error = error[:2000]
        _schedule_retry(item, now)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Queue item {item_id} left in processing: {e}")


def _record_domain_outcome(db: Session, domain: str, now: datetime, success: bool) -> None:
    counter = ScrapeDomain.successful_scrapes if success else ScrapeDomain.failed_scrapes
    updated = db.query(ScrapeDomain).filter(ScrapeDomain.domain == domain).update(
        {counter: counter + 1, ScrapeDomain.last_scraped_at: now},
        synchronize_session=False,
    )
    if not updated:
        logger.debug(f"No domain config for {domain}, stats not recorded")


def enqueue_urls(db: Session, urls: list[str], priority: int | None = None) -> EnqueueResult:
    """Seed URLs into the queue by hand. Already-queued URLs are left untouched."""
    priority = settings.seed_priority if priority is None else priority
    result = EnqueueResult()

    valid: list[str] = []
    for raw in urls:
        try:
            url = validate_http_url(raw)
        except ValueError:
            result.invalid.append(raw)
            continue
        if url not in valid:
            valid.append(url)

    existing = {
        row.url for row in db.query(ScrapeQueueItem.url).filter(ScrapeQueueItem.url.in_(valid))
    } if valid else set()

    for url in valid:
        if url in existing:
            result.skipped += 1
            continue
        db.add(ScrapeQueueItem(
            url=url,
            domain=domain_from_url(url),
            status="pending",
            priority=priority,
            attempts=0,
            max_attempts=settings.queue_max_attempts,
            scheduled_for=utcnow(),
        ))
        result.added += 1

    db.commit()
    logger.info(f"Enqueued {result.added} URLs ({result.skipped} already queued, {len(result.invalid)} invalid)")
    return result


def queue_stats(db: Session) -> dict[str, int]:
    """Queue item counts by status plus the number of stored recipes."""
    counts = dict(
        db.query(ScrapeQueueItem.status, func.count(ScrapeQueueItem.id))
        .group_by(ScrapeQueueItem.status)
        .all()
    )
    stats = {status: counts.get(status, 0) for status in QUEUE_STATUSES}
    stats["recipes"] = db.query(func.count(Recipe.id)).filter(Recipe.is_deleted == False).scalar() or 0  # noqa: E712
    return stats
