"""Fixed-window rate limiting for the AI endpoints.

The window algorithm talks to a small store interface so the in-process
dict can be swapped for a shared store without touching the algorithm.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from functools import lru_cache
from typing import Protocol

from agentda.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of one admission check."""

    allowed: bool
    limit: int
    remaining: int


@dataclass
class WindowRecord:
    """Request count for one identifier in its current window."""

    count: int
    reset_at: float


class RateLimitStore(Protocol):
    def get(self, key: str) -> WindowRecord | None: ...

    def set(self, key: str, record: WindowRecord) -> None: ...

    def delete(self, key: str) -> None: ...

    def items(self) -> Iterator[tuple[str, WindowRecord]]: ...


class InMemoryRateLimitStore:
    """Process-local store; not shared between workers."""

    def __init__(self) -> None:
        self._records: dict[str, WindowRecord] = {}

    def get(self, key: str) -> WindowRecord | None:
        return self._records.get(key)

    def set(self, key: str, record: WindowRecord) -> None:
        self._records[key] = record

    def delete(self, key: str) -> None:
        self._records.pop(key, None)

    def items(self) -> Iterator[tuple[str, WindowRecord]]:
        # Copy so callers may delete while iterating.
        return iter(list(self._records.items()))

    def __len__(self) -> int:
        return len(self._records)


class FixedWindowRateLimiter:
    """Allow *limit* requests per identifier per *window_seconds*.

    The first request after a window expires opens a new window with a
    count of one. ``check`` and ``sweep`` are safe to call from several
    threads at once.
    """

    def __init__(
        self,
        store: RateLimitStore,
        limit: int = 50,
        window_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if limit <= 0 or window_seconds <= 0:
            raise ValueError("limit and window_seconds must be positive")
        self.store = store
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()

    @staticmethod
    def _key(identifier: str) -> str:
        return f"ratelimit:{identifier}"

    def check(self, identifier: str) -> RateLimitDecision:
        """Count one request for *identifier* and decide whether to admit it."""
        key = self._key(identifier)
        with self._lock:
            return self._check_locked(identifier, key)

    def _check_locked(self, identifier: str, key: str) -> RateLimitDecision:
        now = self._clock()
        record = self.store.get(key)

        if record is None or record.reset_at <= now:
            self.store.set(key, WindowRecord(count=1, reset_at=now + self.window_seconds))
            return RateLimitDecision(allowed=True, limit=self.limit, remaining=self.limit - 1)

        if record.count >= self.limit:
            logger.warning("Rate limit exceeded for %s", identifier)
            return RateLimitDecision(allowed=False, limit=self.limit, remaining=0)

        record = WindowRecord(count=record.count + 1, reset_at=record.reset_at)
        self.store.set(key, record)
        return RateLimitDecision(
            allowed=True, limit=self.limit, remaining=self.limit - record.count
        )

    def sweep(self) -> int:
        """Drop expired windows; returns how many were removed."""
        removed = 0
        with self._lock:
            now = self._clock()
            for key, record in self.store.items():
                if record.reset_at <= now:
                    self.store.delete(key)
                    removed += 1
        if removed:
            logger.debug("Swept %d expired rate-limit windows", removed)
        return removed


@lru_cache(maxsize=1)
def get_rate_limiter() -> FixedWindowRateLimiter:
    """Return the process-wide limiter configured from settings."""
    return FixedWindowRateLimiter(
        InMemoryRateLimitStore(),
        limit=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
