"""
Shared pytest fixtures.

Provides:
- In-memory SQLite session with the full schema
- A rate limiter that never sleeps
- Factories for queue items, domains and recipe pages
- --run-integration flag for tests that hit live recipe sites
"""

import json
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from simmer.models import Base
from simmer.models.scrape_domain import ScrapeDomain
from simmer.models.scrape_queue import ScrapeQueueItem
from simmer.scraper.rate_limiter import RateLimiter

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def pytest_addoption(parser):
    """Add custom pytest options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked integration (needs network access)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: hits real recipe sites over the network")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-integration"):
        return
    skip = pytest.mark.skip(reason="needs --run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


def naive(value: datetime) -> datetime:
    """SQLite hands datetimes back without tzinfo."""
    return value.replace(tzinfo=None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def limiter():
    """Rate limiter that records waits instead of sleeping."""
    return RateLimiter(0.0, sleep=lambda seconds: None)


@pytest.fixture
def add_domain(db):
    def _add(domain="example.com", sitemap_url=None, **kwargs):
        row = ScrapeDomain(
            domain=domain,
            sitemap_url=sitemap_url,
            is_enabled=kwargs.pop("is_enabled", True),
            rate_limit_seconds=kwargs.pop("rate_limit_seconds", 5.0),
            successful_scrapes=0,
            failed_scrapes=0,
            **kwargs,
        )
        db.add(row)
        db.commit()
        return row
    return _add


@pytest.fixture
def add_queue_item(db):
    def _add(url, priority=0, attempts=0, max_attempts=3, status="pending", scheduled_for=None, domain="example.com"):
        item = ScrapeQueueItem(
            url=url,
            domain=domain,
            status=status,
            priority=priority,
            attempts=attempts,
            max_attempts=max_attempts,
            scheduled_for=scheduled_for or NOW - timedelta(minutes=1),
        )
        db.add(item)
        db.commit()
        return item
    return _add


def recipe_page(schema, extra_blocks=()) -> str:
    """Wrap one or more JSON-LD payloads in a minimal HTML page."""
    scripts = "".join(
        f'<script type="application/ld+json">{block if isinstance(block, str) else json.dumps(block)}</script>'
        for block in (*extra_blocks, schema)
    )
    return f"<html><head><title>Test</title>{scripts}</head><body><p>Hello</p></body></html>"


PANCAKES = {
    "@context": "https://schema.org",
    "@type": "Recipe",
    "name": "Fluffy Pancakes",
    "description": "Light &amp; fluffy <b>buttermilk</b> pancakes.",
    "author": {"@type": "Person", "name": "Jane Cook"},
    "prepTime": "PT10M",
    "cookTime": "PT20M",
    "totalTime": "PT30M",
    "recipeYield": ["8", "8 pancakes"],
    "recipeCuisine": "American",
    "recipeCategory": ["Breakfast", "Breakfast", "Brunch"],
    "keywords": "easy, vegetarian",
    "recipeIngredient": [
        "2 cups all-purpose flour",
        "1 1/2 cups buttermilk",
        "2 large eggs, beaten",
        "½ teaspoon salt",
    ],
    "recipeInstructions": [
        {"@type": "HowToStep", "text": "Whisk the dry ingredients."},
        {"@type": "HowToStep", "text": "Stir in buttermilk and eggs."},
        {"@type": "HowToStep", "text": "Cook on a hot griddle."},
    ],
    "nutrition": {
        "@type": "NutritionInformation",
        "calories": "220 calories",
        "proteinContent": "7 g",
        "sodiumContent": "380 mg",
    },
}
