"""Seed the scrape queue with specific recipe URLs.

URLs come from the command line and/or a file with one URL per line
(blank lines and lines starting with # are ignored). Seeded URLs go in
at seed priority so they are scraped ahead of sitemap discoveries.

Usage:
    docker compose exec backend python -m scripts.seed_urls https://www.allrecipes.com/recipe/10813/best-chocolate-chip-cookies/
    docker compose exec backend python -m scripts.seed_urls --file /app/data/urls.txt --priority 20
"""

import argparse
import logging
import sys

from simmer.models.session import SyncSessionLocal
from simmer.services.scrape_queue import enqueue_urls

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def read_url_file(path: str) -> list[str]:
    with open(path) as f:
        return [line.strip() for line in f if line.strip() and not line.lstrip().startswith("#")]


def seed(urls: list[str], priority: int | None = None):
    db = SyncSessionLocal()
    try:
        result = enqueue_urls(db, urls, priority=priority)
        print(f"\nQueued {result.added} URLs ({result.skipped} already queued)")
        for url in result.invalid:
            print(f"  Invalid: {url}")
        return result
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Add recipe URLs to the scrape queue")
    parser.add_argument("urls", nargs="*", help="Recipe URLs")
    parser.add_argument("--file", help="File with one URL per line")
    parser.add_argument("--priority", type=int, default=None, help="Queue priority (default: SEED_PRIORITY)")
    args = parser.parse_args()

    urls = list(args.urls)
    if args.file:
        urls.extend(read_url_file(args.file))
    if not urls:
        parser.error("no URLs given")

    result = seed(urls, priority=args.priority)
    sys.exit(1 if result.invalid else 0)
