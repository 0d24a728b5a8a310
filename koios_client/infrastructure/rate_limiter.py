"""Client-side request rate limiting."""

import asyncio
import collections
import logging
import time

from ..application.exceptions import ConfigurationError, ErrorKind

MAX_RATE = 255


class RateLimiter:
    """
    Sliding-window limiter: at most ``rate`` permits in any ``period``.

    Waiters are served in FIFO order. A waiter sleeps until the oldest
    permit in the window expires and can be cancelled while waiting.
    """

    def __init__(self, rate: int, period: float = 1.0):
        """
        Args:
            rate: Permits per period, 1-255.
            period: Window length in seconds.

        Raises:
            ConfigurationError: If rate is out of range.
        """
        if isinstance(rate, bool) or not 1 <= rate <= MAX_RATE:
            raise ConfigurationError(ErrorKind.RATE_LIMIT_RANGE, f"got {rate}")
        self.rate = rate
        self.period = period
        self._dispatched = collections.deque()
        self._lock = asyncio.Lock()
        self.logger = logging.getLogger(self.__class__.__name__)

    def _expire(self, now: float):
        while self._dispatched and now - self._dispatched[0] >= self.period:
            self._dispatched.popleft()

    async def acquire(self):
        """Wait until a permit is available and take it."""
        async with self._lock:
            while True:
                now = time.monotonic()
                self._expire(now)
                if len(self._dispatched) < self.rate:
                    self._dispatched.append(now)
                    return
                delay = self.period - (now - self._dispatched[0])
                self.logger.debug(f"Rate limit reached, waiting {delay:.3f}s")
                await asyncio.sleep(delay)

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None
