"""Seed scrape_domains with well-known recipe sites.

Existing domains are updated in place (sitemap URL, rate limit, enabled),
so the script is safe to re-run.

Usage:
    docker compose exec backend python -m scripts.seed_domains
    docker compose exec backend python -m scripts.seed_domains --disable-missing
"""

import argparse
import logging
import uuid

from simmer.models.session import SyncSessionLocal
from simmer.models.scrape_domain import ScrapeDomain

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)

# Tier 1: strong schema.org coverage
# Tier 2: good coverage
# Tier 3: niche / diet-specific
SEED_DOMAINS = [
    {"domain": "allrecipes.com", "sitemap_url": "https://www.allrecipes.com/sitemap.xml"},
    {"domain": "foodnetwork.com", "sitemap_url": "https://www.foodnetwork.com/sitemap.xml"},
    {"domain": "seriouseats.com", "sitemap_url": "https://www.seriouseats.com/sitemap.xml"},
    {"domain": "bonappetit.com", "sitemap_url": "https://www.bonappetit.com/sitemap.xml"},
    {"domain": "epicurious.com", "sitemap_url": "https://www.epicurious.com/sitemap.xml"},
    {"domain": "bbcgoodfood.com", "sitemap_url": "https://www.bbcgoodfood.com/sitemap.xml"},
    {"domain": "tasteofhome.com", "sitemap_url": "https://www.tasteofhome.com/sitemap.xml"},
    {"domain": "delish.com", "sitemap_url": "https://www.delish.com/sitemap.xml"},
    {"domain": "simplyrecipes.com", "sitemap_url": "https://www.simplyrecipes.com/sitemap.xml"},
    {"domain": "budgetbytes.com", "sitemap_url": "https://www.budgetbytes.com/sitemap.xml"},
    {"domain": "minimalistbaker.com", "sitemap_url": "https://minimalistbaker.com/sitemap.xml"},
    {"domain": "cookieandkate.com", "sitemap_url": "https://cookieandkate.com/sitemap.xml"},
    {"domain": "smittenkitchen.com", "sitemap_url": "https://smittenkitchen.com/sitemap.xml"},
    {"domain": "thepioneerwoman.com", "sitemap_url": "https://www.thepioneerwoman.com/sitemap.xml"},
    {"domain": "skinnytaste.com", "sitemap_url": "https://www.skinnytaste.com/sitemap.xml"},
    {"domain": "dietdoctor.com", "sitemap_url": "https://www.dietdoctor.com/sitemap.xml"},
    {"domain": "ohsheglows.com", "sitemap_url": "https://ohsheglows.com/sitemap.xml"},
    {"domain": "kingarthurbaking.com", "sitemap_url": "https://www.kingarthurbaking.com/sitemap.xml"},
]

DEFAULT_RATE_LIMIT_SECONDS = 5.0


def seed(disable_missing: bool = False):
    db = SyncSessionLocal()
    try:
        created = updated = 0
        seeded = {entry["domain"] for entry in SEED_DOMAINS}

        for entry in SEED_DOMAINS:
            domain = db.query(ScrapeDomain).filter(ScrapeDomain.domain == entry["domain"]).first()
            if domain:
                domain.sitemap_url = entry["sitemap_url"]
                domain.rate_limit_seconds = entry.get("rate_limit_seconds", DEFAULT_RATE_LIMIT_SECONDS)
                domain.is_enabled = True
                updated += 1
                print(f"  Updated: {entry['domain']}")
            else:
                db.add(ScrapeDomain(
                    id=uuid.uuid4(),
                    domain=entry["domain"],
                    sitemap_url=entry["sitemap_url"],
                    rate_limit_seconds=entry.get("rate_limit_seconds", DEFAULT_RATE_LIMIT_SECONDS),
                    is_enabled=True,
                ))
                created += 1
                print(f"  Added: {entry['domain']}")

        disabled = 0
        if disable_missing:
            disabled = db.query(ScrapeDomain).filter(
                ScrapeDomain.domain.notin_(seeded),
                ScrapeDomain.is_enabled == True,  # noqa: E712
            ).update({ScrapeDomain.is_enabled: False}, synchronize_session=False)

        db.commit()
        print(f"\nDone: {created} added, {updated} updated, {disabled} disabled")
        print("\nNext steps:")
        print('  curl -X POST -H "Authorization: Bearer $CRON_SECRET" http://localhost:8000/api/v1/cron/discover')
        print('  curl -X POST -H "Authorization: Bearer $CRON_SECRET" http://localhost:8000/api/v1/cron/scrape')
    except Exception:
        db.rollback()
        logger.exception("Seeding domains failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed recipe scrape domains")
    parser.add_argument("--disable-missing", action="store_true", help="Disable domains not in the seed list")
    args = parser.parse_args()
    seed(disable_missing=args.disable_missing)
