"""Minimum-interval rate limiter shared by every outbound request"""

import asyncio
import threading
import time
from typing import Callable, Optional

from loguru import logger

from .config import MIN_REQUEST_INTERVAL


class MinIntervalRateLimiter:
    """
    Spaces requests at least `min_interval` seconds apart.

    The slot is reserved under the lock before sleeping, so concurrent
    callers queue up behind each other instead of computing the same
    wait and firing together.
    """

    def __init__(
        self,
        min_interval: float = MIN_REQUEST_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable = asyncio.sleep,
    ):
        """
        Initialize rate limiter.

        Args:
            min_interval: Minimum spacing between requests in seconds
            clock: Monotonic clock returning seconds
            sleep: Coroutine function used to wait
        """
        self.min_interval = min_interval
        self.clock = clock
        self.sleep = sleep
        self.last_request: Optional[float] = None
        # Guards last_request across event loops and threads
        self.lock = threading.Lock()

        logger.debug(f"Rate limiter initialized: min interval {min_interval:.2f}s")

    async def acquire(self) -> float:
        """Wait until a request may be sent. Returns the time waited."""
        with self.lock:
            now = self.clock()
            wait_time = 0.0
            if self.last_request is not None:
                wait_time = max(0.0, self.last_request + self.min_interval - now)
            self.last_request = now + wait_time

        if wait_time > 0:
            logger.debug(f"Rate limiter: waiting {wait_time:.2f}s before next request")
            await self.sleep(wait_time)
        return wait_time


_SHARED_RATE_LIMITER: Optional[MinIntervalRateLimiter] = None


def get_shared_rate_limiter() -> MinIntervalRateLimiter:
    """Get or create the process-wide rate limiter"""
    global _SHARED_RATE_LIMITER
    if _SHARED_RATE_LIMITER is None:
        _SHARED_RATE_LIMITER = MinIntervalRateLimiter()
    return _SHARED_RATE_LIMITER
