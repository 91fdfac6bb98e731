"""Start-rate limiting for job queues.

Downloads may start at most N times per sliding window. The limiter is
in-memory and per-process, like the queues that own it.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimit:
    """At most ``max_starts`` job starts per ``window_seconds``."""

    max_starts: int
    window_seconds: float = 1.0


@dataclass
class SlidingWindowCounter:
    """Sliding window counter for rate limiting.

    Uses a deque of monotonic timestamps for O(1) amortized expiry.
    Timestamps are appended in order, so the oldest is always at the left.
    """

    starts: deque[float] = field(default_factory=deque)

    def record_and_check(
        self, now: float, max_starts: int, window_seconds: float
    ) -> bool:
        """Record a start and check if within limit.

        Args:
            now: Current monotonic timestamp.
            max_starts: Maximum allowed starts in window.
            window_seconds: Window duration in seconds.

        Returns:
            True if the start is allowed, False if rate limited.
        """
        cutoff = now - window_seconds
        while self.starts and self.starts[0] <= cutoff:
            self.starts.popleft()
        if len(self.starts) >= max_starts:
            return False
        self.starts.append(now)
        return True

    def seconds_until_available(self, now: float, window_seconds: float) -> float:
        """Calculate seconds until the next start slot opens.

        Must be called after record_and_check() which prunes expired entries.
        """
        if not self.starts:
            return 0.0
        # Oldest entry is always at index 0 (monotonic append order)
        return max(0.0, window_seconds - (now - self.starts[0]))


class StartRateLimiter:
    """Async gate enforcing a RateLimit on job starts."""

    def __init__(
        self,
        limit: RateLimit,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self._clock = clock
        self._counter = SlidingWindowCounter()

    async def acquire(self) -> None:
        """Wait until a start is allowed, then record it."""
        while True:
            now = self._clock()
            if self._counter.record_and_check(
                now, self.limit.max_starts, self.limit.window_seconds
            ):
                return
            delay = self._counter.seconds_until_available(
                now, self.limit.window_seconds
            )
            logger.debug("Start rate limited, waiting %.3fs", delay)
            await asyncio.sleep(delay)
