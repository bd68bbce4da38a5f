"""Scrape domain configuration endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from simmer.models.session import get_db
from simmer.models.scrape_domain import ScrapeDomain
from simmer.schemas.scrape_queue import ScrapeDomainRead

router = APIRouter(prefix="/domains", tags=["domains"])


@router.get("", response_model=list[ScrapeDomainRead])
async def list_domains(
    db: AsyncSession = Depends(get_db),
    enabled_only: bool = Query(False, description="Only return enabled domains"),
):
    """List domain configs with scrape counters."""
    query = select(ScrapeDomain)
    if enabled_only:
        query = query.where(ScrapeDomain.is_enabled == True)  # noqa: E712
    result = await db.execute(query.order_by(ScrapeDomain.domain))
    return result.scalars().all()
