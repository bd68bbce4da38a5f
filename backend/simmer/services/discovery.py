"""Sitemap discovery: find candidate recipe URLs and add them to the queue."""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Final

from bs4 import BeautifulSoup
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from simmer.config import get_settings
from simmer.models.base import utcnow
from simmer.models.recipe import Recipe
from simmer.models.scrape_domain import ScrapeDomain
from simmer.models.scrape_queue import ScrapeQueueItem
from simmer.scraper.fetcher import fetch_with_retry
from simmer.scraper.rate_limiter import RateLimiter, rate_limiter

logger = logging.getLogger(__name__)
settings = get_settings()

# A URL must contain one of these path segments to be queued
RECIPE_PATH_PATTERNS: Final[list[str]] = [
    r"/recipes?/",
    r"/receitas?/",
    r"/recettes?/",
    r"/rezepte?/",
    r"/recetas?/",
    r"/ricette/",
    r"/ricetta/",
]

# ...and none of these
EXCLUDED_PATH_PATTERNS: Final[list[str]] = [
    r"/categor(?:y|ies)(?:/|$)",
    r"/tags?(?:/|$)",
    r"/authors?(?:/|$)",
    r"/search(?:/|$)",
    r"/page/\d*",
    r"[?&]page=",
    r"/wp-content/",
    r"/wp-admin/",
    r"/wp-json/",
    r"/feed/?$",
]

EXCLUDED_EXTENSIONS: Final[tuple[str, ...]] = (
    ".pdf", ".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".zip", ".xml", ".css", ".js",
)

# Existing-URL lookups are chunked to keep IN lists bounded
LOOKUP_CHUNK_SIZE = 500


@dataclass
class DiscoveryResult:
    success: bool = True
    domains_processed: int = 0
    urls_discovered: int = 0
    urls_added: int = 0
    errors: list[dict] = field(default_factory=list)
    error: str | None = None


def is_likely_recipe_url(url: str) -> bool:
    """Heuristic: recipe-like path and not a listing, taxonomy or asset URL."""
    lower = url.lower()
    path = lower.split("?", 1)[0].split("#", 1)[0]

    if path.endswith(EXCLUDED_EXTENSIONS):
        return False
    if any(re.search(pattern, lower) for pattern in EXCLUDED_PATH_PATTERNS):
        return False
    return any(re.search(pattern, lower) for pattern in RECIPE_PATH_PATTERNS)


def parse_sitemap(content: str) -> tuple[list[str], list[str]]:
    """Split a sitemap document into (page URLs, child sitemap URLs)."""
    soup = BeautifulSoup(content, "xml")

    page_urls = []
    for entry in soup.find_all("url"):
        loc = entry.find("loc")
        if loc and loc.get_text(strip=True):
            page_urls.append(loc.get_text(strip=True))

    child_sitemaps = []
    for entry in soup.find_all("sitemap"):
        loc = entry.find("loc")
        if loc and loc.get_text(strip=True):
            child_sitemaps.append(loc.get_text(strip=True))

    return page_urls, child_sitemaps


class SitemapDiscoverer:
    """Walks sitemaps for enabled domains and queues new recipe URLs."""

    def __init__(
        self,
        db: Session,
        fetch: Callable[[str], str] = fetch_with_retry,
        limiter: RateLimiter = rate_limiter,
    ):
        self.db = db
        self.fetch = fetch
        self.limiter = limiter

    def run(self) -> DiscoveryResult:
        """Discover URLs for every enabled domain with a sitemap.

        One domain failing is recorded in ``errors`` and does not stop the others.
        """
        result = DiscoveryResult()
        try:
            domains = self.db.query(ScrapeDomain).filter(
                ScrapeDomain.is_enabled == True,  # noqa: E712
                ScrapeDomain.sitemap_url.isnot(None),
            ).order_by(ScrapeDomain.domain).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load scrape domains: {e}")
            return DiscoveryResult(success=False, error=f"Failed to fetch domains: {e}")

        if not domains:
            logger.info("No domains configured for discovery")
            return result

        for domain in domains:
            name = domain.domain
            try:
                discovered, added = self.discover_domain(domain)
                result.urls_discovered += discovered
                result.urls_added += added
                result.domains_processed += 1
            except Exception as e:
                self.db.rollback()
                logger.error(f"[{name}] Discovery failed: {e}")
                result.errors.append({"domain": name, "error": str(e) or type(e).__name__})

        logger.info(
            f"Discovery finished: {result.domains_processed} domains, "
            f"{result.urls_discovered} URLs seen, {result.urls_added} queued, {len(result.errors)} errors"
        )
        return result

    def discover_domain(self, domain: ScrapeDomain) -> tuple[int, int]:
        """Fetch one domain's sitemap(s) and queue unseen recipe URLs. Returns (discovered, added)."""
        urls = self.collect_urls(domain.sitemap_url, domain.domain, domain.rate_limit_seconds)
        recipe_urls = list(dict.fromkeys(u for u in urls if is_likely_recipe_url(u)))

        known = self._known_urls(recipe_urls)
        new_urls = [u for u in recipe_urls if u not in known]

        self.db.add_all(
            ScrapeQueueItem(
                url=url,
                domain=domain.domain,
                status="pending",
                priority=0,
                attempts=0,
                max_attempts=settings.queue_max_attempts,
                scheduled_for=utcnow(),
            )
            for url in new_urls
        )
        domain.sitemap_last_fetched = utcnow()
        self.db.commit()

        logger.info(
            f"[{domain.domain}] {len(urls)} sitemap URLs, {len(recipe_urls)} recipe-like, {len(new_urls)} new"
        )
        return len(urls), len(new_urls)

    def collect_urls(self, sitemap_url: str, domain: str, delay: float | None = None, depth: int = 0) -> list[str]:
        """Fetch a sitemap, following sitemap-index entries up to the configured depth."""
        self.limiter.throttle(domain, delay)
        content = self.fetch(sitemap_url)
        page_urls, child_sitemaps = parse_sitemap(content)

        if child_sitemaps and depth < settings.sitemap_max_depth:
            recipe_children = [u for u in child_sitemaps if "recipe" in u.lower()]
            targets = (recipe_children or child_sitemaps)[:settings.sitemap_max_children]
            for child in targets:
                try:
                    page_urls.extend(self.collect_urls(child, domain, delay, depth + 1))
                except Exception as e:
                    logger.warning(f"[{domain}] Skipping child sitemap {child}: {e}")
        elif child_sitemaps:
            logger.debug(f"[{domain}] Max sitemap depth reached at {sitemap_url}")

        return page_urls

    def _known_urls(self, urls: list[str]) -> set[str]:
        """URLs already queued or already stored as recipes."""
        known: set[str] = set()
        for start in range(0, len(urls), LOOKUP_CHUNK_SIZE):
            chunk = urls[start:start + LOOKUP_CHUNK_SIZE]
            known.update(
                row.url for row in self.db.query(ScrapeQueueItem.url).filter(ScrapeQueueItem.url.in_(chunk))
            )
            known.update(
                row.source_url for row in self.db.query(Recipe.source_url).filter(Recipe.source_url.in_(chunk))
            )
        return known


def discover_urls(db: Session, **kwargs) -> DiscoveryResult:
    """Run discovery with the shared fetcher and rate limiter."""
    return SitemapDiscoverer(db, **kwargs).run()
