"""HTTP fetcher with retry and exponential backoff."""

import logging
import time

import httpx

from simmer.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
ACCEPT_LANGUAGE = "en-US,en;q=0.5"


class FetchError(Exception):
    """Raised when a URL could not be fetched after all attempts."""

    def __init__(self, message: str, url: str, status_code: int | None = None, retryable: bool = True):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.retryable = retryable


def is_retryable_status(status_code: int) -> bool:
    """Client errors never self-resolve, except 429 Too Many Requests."""
    if status_code == 429:
        return True
    return not 400 <= status_code < 500


def fetch_with_retry(
    url: str,
    *,
    user_agent: str | None = None,
    timeout: float | None = None,
    max_retries: int | None = None,
    base_delay: float | None = None,
    client: httpx.Client | None = None,
) -> str:
    """Fetch a URL and return the response body as text.

    Makes up to ``max_retries`` attempts. Network errors, timeouts, 5xx and
    429 responses are retried after ``base_delay * 2**attempt`` seconds; any
    other 4xx fails immediately.

    Raises:
        FetchError: when the final attempt fails or a non-retryable status is hit.
    """
    user_agent = user_agent or settings.scrape_user_agent
    timeout = settings.scrape_timeout_seconds if timeout is None else timeout
    max_retries = settings.scrape_max_retries if max_retries is None else max_retries
    base_delay = settings.scrape_retry_base_delay if base_delay is None else base_delay

    headers = {
        "User-Agent": user_agent,
        "Accept": ACCEPT_HEADER,
        "Accept-Language": ACCEPT_LANGUAGE,
    }

    owns_client = client is None
    if owns_client:
        client = httpx.Client(timeout=timeout, follow_redirects=True)

    last_error: FetchError | None = None
    try:
        for attempt in range(max(1, max_retries)):
            try:
                response = client.get(url, headers=headers, timeout=timeout, follow_redirects=True)
                if response.is_success:
                    return response.text

                status = response.status_code
                last_error = FetchError(
                    f"HTTP {status}: {response.reason_phrase}",
                    url=url,
                    status_code=status,
                    retryable=is_retryable_status(status),
                )
            except httpx.TimeoutException as e:
                last_error = FetchError(f"Timeout after {timeout}s: {e}", url=url)
            except httpx.HTTPError as e:
                last_error = FetchError(f"Network error: {e}", url=url)

            logger.warning(f"Fetch attempt {attempt + 1} failed for {url}: {last_error}")

            if not last_error.retryable:
                raise last_error

            if attempt < max_retries - 1:
                time.sleep(base_delay * (2 ** attempt))
    finally:
        if owns_client:
            client.close()

    logger.error(f"Giving up on {url} after {max_retries} attempts")
    raise last_error or FetchError("Failed to fetch after retries", url=url)
