"""Single-URL scrape endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from simmer.dependencies.auth import verify_cron_secret
from simmer.models.session import get_sync_db
from simmer.schemas.scrape_queue import ScrapeRequest, ScrapeResponse
from simmer.scraper.recipe_scraper import scrape_recipe

router = APIRouter(prefix="/scrape", tags=["scrape"], dependencies=[Depends(verify_cron_secret)])


@router.post("", response_model=ScrapeResponse, response_model_exclude_none=True)
def scrape_one(request: ScrapeRequest, db: Session = Depends(get_sync_db)):
    """Scrape one URL right now, bypassing the queue."""
    result = scrape_recipe(request.url, db)
    response = ScrapeResponse(
        success=result.success,
        url=result.url,
        recipe_id=result.recipe_id,
        error=result.error,
    )
    if not result.success:
        return JSONResponse(
            status_code=422,
            content=response.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
    return response
