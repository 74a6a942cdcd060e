"""In-memory storage for rate limiting counters.

Fixed-window counters keyed by an arbitrary string (``ip:<addr>``). One
instance is created per application and injected into the middleware, so
tests and alternative deployments can swap or reset it.
"""

import math
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict


@dataclass
class Window:
    """Request count for one key in the current window."""

    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of counting one request.

    Attributes:
        allowed: Whether the request is within the limit.
        limit: Requests allowed per window.
        remaining: Requests left in the current window.
        reset_after: Whole seconds until the window resets (at least 1).
    """

    allowed: bool
    limit: int
    remaining: int
    reset_after: int


class RateLimitStorage:
    """Thread-safe in-memory storage for fixed-window counters."""

    def __init__(
        self,
        cleanup_interval: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize storage.

        Args:
            cleanup_interval: Seconds between sweeps of expired windows.
            clock: Monotonic time source, replaceable in tests.
        """
        self._storage: Dict[str, Window] = {}
        self._lock = Lock()
        self._clock = clock
        self._last_cleanup = clock()
        self._cleanup_interval = cleanup_interval

    def hit(self, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        """Count a request for ``key`` and report whether it is allowed.

        Args:
            key: The unique key, e.g. ``ip:203.0.113.7``.
            limit: Maximum requests per window.
            window_seconds: Window length in seconds.

        Returns:
            The rate limit decision for this request.
        """
        now = self._clock()

        with self._lock:
            if now - self._last_cleanup > self._cleanup_interval:
                self._cleanup_expired(now)

            window = self._storage.get(key)
            if window is None or now >= window.reset_at:
                window = Window(count=0, reset_at=now + window_seconds)
                self._storage[key] = window

            window.count += 1
            reset_after = max(1, math.ceil(window.reset_at - now))
            allowed = window.count <= limit
            return RateLimitResult(
                allowed=allowed,
                limit=limit,
                remaining=max(0, limit - window.count),
                reset_after=reset_after,
            )

    def clear(self) -> None:
        """Drop all counters."""
        with self._lock:
            self._storage.clear()
            self._last_cleanup = self._clock()

    def __len__(self) -> int:
        return len(self._storage)

    def _cleanup_expired(self, now: float) -> None:
        expired = [k for k, v in self._storage.items() if now >= v.reset_at]
        for k in expired:
            del self._storage[k]
        self._last_cleanup = now
