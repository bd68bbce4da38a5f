"""Tests for scraper/fetcher.py using httpx.MockTransport"""

import httpx
import pytest

from simmer.scraper import fetcher
from simmer.scraper.fetcher import FetchError, fetch_with_retry, is_retryable_status

URL = "https://example.com/recipes/soup"


def mock_client(responses):
    """Client that replays ``responses`` (status codes, exceptions or bodies) in order."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        outcome = responses[min(len(calls), len(responses)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, int):
            return httpx.Response(outcome, text="error")
        return httpx.Response(200, text=outcome)

    return httpx.Client(transport=httpx.MockTransport(handler)), calls


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr(fetcher.time, "sleep", recorded.append)
    return recorded


class TestIsRetryableStatus:
    def test_server_errors_retry(self):
        assert is_retryable_status(500)
        assert is_retryable_status(503)

    def test_too_many_requests_retries(self):
        assert is_retryable_status(429)

    def test_client_errors_do_not_retry(self):
        assert not is_retryable_status(404)
        assert not is_retryable_status(403)
        assert not is_retryable_status(400)


class TestFetchWithRetry:
    """Tests for fetch_with_retry()"""

    def test_success_returns_body(self, sleeps):
        client, calls = mock_client(["<html>ok</html>"])
        assert fetch_with_retry(URL, client=client) == "<html>ok</html>"
        assert len(calls) == 1
        assert sleeps == []

    def test_sends_identifying_headers(self, sleeps):
        client, calls = mock_client(["ok"])
        fetch_with_retry(URL, client=client, user_agent="TestBot/1.0")
        headers = calls[0].headers
        assert headers["user-agent"] == "TestBot/1.0"
        assert "text/html" in headers["accept"]
        assert headers["accept-language"].startswith("en")

    def test_not_found_fails_without_retry(self, sleeps):
        client, calls = mock_client([404])
        with pytest.raises(FetchError) as exc:
            fetch_with_retry(URL, client=client, max_retries=3, base_delay=1.0)
        assert len(calls) == 1
        assert exc.value.status_code == 404
        assert exc.value.retryable is False
        assert sleeps == []

    def test_server_error_retried_with_backoff(self, sleeps):
        client, calls = mock_client([503, 503, 503])
        with pytest.raises(FetchError) as exc:
            fetch_with_retry(URL, client=client, max_retries=3, base_delay=1.0)
        assert len(calls) == 3
        assert sleeps == [1.0, 2.0]
        assert exc.value.status_code == 503
        assert "503" in str(exc.value)

    def test_recovers_after_transient_errors(self, sleeps):
        client, calls = mock_client([500, 429, "<html>finally</html>"])
        assert fetch_with_retry(URL, client=client, max_retries=3, base_delay=0.5) == "<html>finally</html>"
        assert len(calls) == 3
        assert sleeps == [0.5, 1.0]

    def test_timeout_is_retryable(self, sleeps):
        timeout = httpx.ReadTimeout("timed out")
        client, calls = mock_client([timeout, "recovered"])
        assert fetch_with_retry(URL, client=client, max_retries=3, base_delay=0) == "recovered"
        assert len(calls) == 2

    def test_network_error_exhausts_retries(self, sleeps):
        client, calls = mock_client([httpx.ConnectError("refused")])
        with pytest.raises(FetchError) as exc:
            fetch_with_retry(URL, client=client, max_retries=2, base_delay=0)
        assert len(calls) == 2
        assert "Network error" in str(exc.value)
        assert exc.value.url == URL

    def test_single_attempt_when_max_retries_is_one(self, sleeps):
        client, calls = mock_client([502])
        with pytest.raises(FetchError):
            fetch_with_retry(URL, client=client, max_retries=1, base_delay=1.0)
        assert len(calls) == 1
        assert sleeps == []
