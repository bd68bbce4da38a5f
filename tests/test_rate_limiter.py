"""Tests for scraper/rate_limiter.py"""

import threading
import time

import pytest

from simmer.scraper.rate_limiter import RateLimiter


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(5.0, clock=clock, sleep=clock.sleep)


class TestThrottle:
    def test_first_request_is_immediate(self, limiter, clock):
        assert limiter.throttle("example.com") == 0
        assert clock.sleeps == []

    def test_second_request_waits_full_interval(self, limiter, clock):
        limiter.throttle("example.com")
        assert limiter.throttle("example.com") == pytest.approx(5.0)
        assert clock.sleeps == [pytest.approx(5.0)]

    def test_waits_only_the_remainder(self, limiter, clock):
        limiter.throttle("example.com")
        clock.now += 3.0
        assert limiter.throttle("example.com") == pytest.approx(2.0)

    def test_no_wait_after_interval_elapsed(self, limiter, clock):
        limiter.throttle("example.com")
        clock.now += 6.0
        assert limiter.throttle("example.com") == 0

    def test_domains_are_independent(self, limiter, clock):
        limiter.throttle("a.com")
        assert limiter.throttle("b.com") == 0
        assert clock.sleeps == []

    def test_per_call_delay_override(self, limiter, clock):
        limiter.throttle("slow.com", 10.0)
        assert limiter.throttle("slow.com", 10.0) == pytest.approx(10.0)

    def test_zero_delay_never_waits(self, clock):
        limiter = RateLimiter(0.0, clock=clock, sleep=clock.sleep)
        limiter.throttle("fast.com")
        assert limiter.throttle("fast.com") == 0

    def test_negative_default_rejected(self):
        with pytest.raises(ValueError):
            RateLimiter(-1.0)


class TestGetWaitTime:
    def test_unknown_domain(self, limiter):
        assert limiter.get_wait_time("never.com") == 0

    def test_remaining_wait_without_blocking(self, limiter, clock):
        limiter.throttle("example.com")
        clock.now += 1.5
        assert limiter.get_wait_time("example.com") == pytest.approx(3.5)
        assert clock.sleeps == []


def test_concurrent_callers_are_serialized():
    """Concurrent callers for one domain must each wait out the interval."""
    limiter = RateLimiter(0.05)
    dispatched = []
    start = threading.Barrier(3)

    def worker():
        start.wait()
        limiter.throttle("shared.com")
        dispatched.append(time.monotonic())

    began = time.monotonic()
    threads = [threading.Thread(target=worker) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    # Three dispatches on one domain need at least two full intervals
    assert len(dispatched) == 3
    assert max(dispatched) - began >= 0.1
