"""Tests for the fixed-window rate limiter."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from agentda.ratelimit import (
    FixedWindowRateLimiter,
    InMemoryRateLimitStore,
    RateLimitDecision,
    WindowRecord,
)


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(InMemoryRateLimitStore(), limit=3, window_seconds=60, clock=clock)


class TestFixedWindowRateLimiter:
    def test_first_request_opens_window(self, limiter: FixedWindowRateLimiter) -> None:
        assert limiter.check("alice") == RateLimitDecision(allowed=True, limit=3, remaining=2)

    def test_counts_down_then_rejects(self, limiter: FixedWindowRateLimiter) -> None:
        decisions = [limiter.check("alice") for _ in range(4)]
        assert [d.remaining for d in decisions] == [2, 1, 0, 0]
        assert [d.allowed for d in decisions] == [True, True, True, False]

    def test_identifiers_are_independent(self, limiter: FixedWindowRateLimiter) -> None:
        for _ in range(3):
            limiter.check("alice")
        assert limiter.check("alice").allowed is False
        assert limiter.check("bob").allowed is True

    def test_window_resets_after_expiry(
        self, limiter: FixedWindowRateLimiter, clock: FakeClock
    ) -> None:
        for _ in range(4):
            limiter.check("alice")
        clock.now += 60
        assert limiter.check("alice") == RateLimitDecision(allowed=True, limit=3, remaining=2)

    def test_rejections_do_not_extend_window(
        self, limiter: FixedWindowRateLimiter, clock: FakeClock
    ) -> None:
        for _ in range(10):
            limiter.check("alice")
        clock.now += 59
        assert limiter.check("alice").allowed is False
        clock.now += 1
        assert limiter.check("alice").allowed is True

    def test_sweep_removes_only_expired(
        self, limiter: FixedWindowRateLimiter, clock: FakeClock
    ) -> None:
        limiter.check("alice")
        clock.now += 30
        limiter.check("bob")
        clock.now += 30

        assert limiter.sweep() == 1
        assert limiter.store.get("ratelimit:alice") is None
        assert limiter.store.get("ratelimit:bob") == WindowRecord(count=1, reset_at=1_090.0)

    def test_uses_injected_store(self, clock: FakeClock) -> None:
        store = InMemoryRateLimitStore()
        store.set("ratelimit:carol", WindowRecord(count=5, reset_at=clock.now + 10))
        limiter = FixedWindowRateLimiter(store, limit=5, window_seconds=60, clock=clock)
        assert limiter.check("carol").allowed is False
        assert len(store) == 1

    @pytest.mark.parametrize(("limit", "window"), [(0, 60), (5, 0)])
    def test_rejects_bad_configuration(self, limit: int, window: int) -> None:
        with pytest.raises(ValueError):
            FixedWindowRateLimiter(InMemoryRateLimitStore(), limit=limit, window_seconds=window)


class SlowStore(InMemoryRateLimitStore):
    """Store whose reads yield to other threads mid-check."""

    def get(self, key: str) -> WindowRecord | None:
        record = super().get(key)
        time.sleep(0.001)
        return record


class TestConcurrency:
    def test_parallel_checks_respect_the_limit(self, clock: FakeClock) -> None:
        limiter = FixedWindowRateLimiter(SlowStore(), limit=5, window_seconds=60, clock=clock)
        limiter.check("u")
        start = threading.Barrier(20)

        def hit() -> bool:
            start.wait()
            return limiter.check("u").allowed

        with ThreadPoolExecutor(max_workers=20) as pool:
            results = list(pool.map(lambda _: hit(), range(20)))

        assert results.count(True) == 4
        assert limiter.store.get("ratelimit:u") == WindowRecord(count=5, reset_at=1_060.0)

    def test_sweep_while_checking(self, clock: FakeClock) -> None:
        limiter = FixedWindowRateLimiter(SlowStore(), limit=100, window_seconds=60, clock=clock)
        for name in ("a", "b", "c"):
            limiter.check(name)
        clock.now += 60

        with ThreadPoolExecutor(max_workers=4) as pool:
            checks = [pool.submit(limiter.check, "d") for _ in range(10)]
            swept = pool.submit(limiter.sweep)
            assert all(f.result().allowed for f in checks)
            assert swept.result() == 3
