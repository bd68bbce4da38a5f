"""Manual queue seeding and queue statistics."""

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from simmer.dependencies.auth import verify_cron_secret
from simmer.models.session import get_sync_db
from simmer.schemas.scrape_queue import EnqueueRequest, EnqueueResponse, QueueStats
from simmer.services.scrape_queue import enqueue_urls, queue_stats

router = APIRouter(prefix="/queue", tags=["queue"], dependencies=[Depends(verify_cron_secret)])


@router.post("", response_model=EnqueueResponse)
def enqueue(request: EnqueueRequest, db: Session = Depends(get_sync_db)):
    """Add URLs to the queue at seed priority."""
    result = enqueue_urls(db, request.urls, priority=request.priority)
    return EnqueueResponse(**asdict(result))


@router.get("/stats", response_model=QueueStats)
def get_queue_stats(db: Session = Depends(get_sync_db)):
    """Queue counts by status and the stored recipe total."""
    return QueueStats(**queue_stats(db))
