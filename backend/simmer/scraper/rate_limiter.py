"""Per-domain rate limiter shared by page and sitemap fetches."""

import logging
import threading
import time
from typing import Callable

from simmer.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class RateLimiter:
    """
    Enforces a minimum interval between dispatches to the same domain.

    Callers for one domain are serialized on a per-domain lock, so two
    concurrent callers never both see a stale last-dispatch time.
    State lives in process memory for the lifetime of the worker.
    """

    def __init__(
        self,
        default_delay: float = 5.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize rate limiter.

        Args:
            default_delay: Minimum seconds between requests to one domain
            clock: Monotonic time source
            sleep: Blocking sleep function
        """
        if default_delay < 0:
            raise ValueError("default_delay must be >= 0")
        self.default_delay = default_delay
        self._clock = clock
        self._sleep = sleep
        self._last_request: dict[str, float] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, domain: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(domain)
            if lock is None:
                lock = self._locks[domain] = threading.Lock()
            return lock

    def _remaining(self, domain: str, delay: float) -> float:
        last_time = self._last_request.get(domain)
        if last_time is None:
            return 0.0
        return max(0.0, delay - (self._clock() - last_time))

    def throttle(self, domain: str, delay: float | None = None) -> float:
        """Block until a request to ``domain`` is allowed, then record it.

        Returns the number of seconds waited.
        """
        delay = self.default_delay if delay is None else max(0.0, delay)
        with self._lock_for(domain):
            wait = self._remaining(domain, delay)
            if wait > 0:
                logger.debug(f"Rate limiting {domain}: waiting {wait:.2f}s")
                self._sleep(wait)
            self._last_request[domain] = self._clock()
            return wait

    def get_wait_time(self, domain: str, delay: float | None = None) -> float:
        """Seconds until the next request to ``domain`` is allowed (non-blocking)."""
        delay = self.default_delay if delay is None else max(0.0, delay)
        return self._remaining(domain, delay)


# Shared instance for the worker process
rate_limiter = RateLimiter(settings.scrape_rate_limit_seconds)
