"""API v1 router aggregation."""

from fastapi import APIRouter

from simmer.api.v1.cron import router as cron_router
from simmer.api.v1.scrape import router as scrape_router
from simmer.api.v1.queue import router as queue_router
from simmer.api.v1.recipes import router as recipes_router
from simmer.api.v1.domains import router as domains_router

router = APIRouter(prefix="/api/v1")

router.include_router(cron_router)
router.include_router(scrape_router)
router.include_router(queue_router)
router.include_router(recipes_router)
router.include_router(domains_router)
