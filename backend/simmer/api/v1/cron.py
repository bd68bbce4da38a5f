"""Scheduled trigger endpoints: discovery and queue batches."""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from simmer.dependencies.auth import verify_cron_secret
from simmer.models.session import get_sync_db
from simmer.schemas.scrape_queue import BatchResponse, DiscoverResponse
from simmer.services.discovery import discover_urls
from simmer.services.scrape_queue import process_batch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"], dependencies=[Depends(verify_cron_secret)])


@router.post("/discover", response_model=DiscoverResponse)
def trigger_discovery(db: Session = Depends(get_sync_db)):
    """Walk every enabled domain's sitemap and queue new recipe URLs."""
    result = discover_urls(db)
    if not result.success:
        return JSONResponse(status_code=500, content={"success": False, "error": result.error})
    return DiscoverResponse(**asdict(result))


@router.post("/scrape", response_model=BatchResponse)
def trigger_batch(db: Session = Depends(get_sync_db)):
    """Scrape the next batch of due queue items."""
    result = process_batch(db)
    if not result.success:
        return JSONResponse(status_code=500, content={"success": False, "error": result.error})
    return BatchResponse(**asdict(result))
