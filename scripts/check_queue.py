"""Print scrape queue status counts, a sample of pending URLs and recent failures.

Usage:
    docker compose exec backend python -m scripts.check_queue
    docker compose exec backend python -m scripts.check_queue --limit 50
"""

import argparse

from simmer.models.session import SyncSessionLocal
from simmer.models.scrape_queue import ScrapeQueueItem
from simmer.services.scrape_queue import queue_stats


def report(limit: int = 20):
    db = SyncSessionLocal()
    try:
        stats = queue_stats(db)

        print("\n=== Scrape Queue ===")
        for status in ("pending", "processing", "completed", "failed", "skipped"):
            print(f"  {status}: {stats[status]}")
        print(f"Total recipes: {stats['recipes']}")

        pending = db.query(ScrapeQueueItem).filter(
            ScrapeQueueItem.status == "pending",
        ).order_by(
            ScrapeQueueItem.priority.desc(),
            ScrapeQueueItem.scheduled_for.asc(),
        ).limit(limit).all()

        print(f"\n=== Next pending ({len(pending)}) ===")
        for item in pending:
            print(f"  [{item.priority}] {item.domain}: {item.url[:80]} (attempts {item.attempts}/{item.max_attempts})")

        failed = db.query(ScrapeQueueItem).filter(
            ScrapeQueueItem.status == "failed",
        ).order_by(ScrapeQueueItem.updated_at.desc()).limit(limit).all()

        if failed:
            print(f"\n=== Recent failures ({len(failed)}) ===")
            for item in failed:
                print(f"  {item.domain}: {item.url[:80]}")
                print(f"      {(item.last_error or '')[:120]}")
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Show scrape queue status")
    parser.add_argument("--limit", type=int, default=20, help="Rows to show per section")
    args = parser.parse_args()
    report(limit=args.limit)
