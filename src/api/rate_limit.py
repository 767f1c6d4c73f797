"""Per-client token-bucket rate limiting for the public API."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from config.settings import settings


@dataclass
class TokenBucket:
    capacity: float
    refill_per_sec: float
    tokens: float
    last_refill: float

    def try_consume(self, now: float, amount: float = 1.0) -> bool:
        elapsed = max(now - self.last_refill, 0.0)
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_per_sec)
        self.last_refill = now
        if self.tokens >= amount:
            self.tokens -= amount
            return True
        return False


class RateLimiter:
    """``limit`` requests per ``window`` seconds for each client key.

    Buckets start full and refill continuously, so a client that has been
    idle for a whole window gets its full allowance back.
    """

    def __init__(
        self,
        limit: Optional[int] = None,
        window: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit if limit is not None else settings.RATE_LIMIT_REQUESTS
        self.window = window if window is not None else settings.RATE_LIMIT_WINDOW_SECONDS
        self._clock = clock
        self._buckets: dict[str, TokenBucket] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.limit > 0 and self.window > 0

    def allow(self, key: str) -> bool:
        if not self.enabled:
            return True
        now = self._clock()
        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = TokenBucket(
                    capacity=float(self.limit),
                    refill_per_sec=self.limit / self.window,
                    tokens=float(self.limit),
                    last_refill=now,
                )
                self._buckets[key] = bucket
            return bucket.try_consume(now)
