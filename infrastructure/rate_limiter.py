import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

import config

logger = logging.getLogger(__name__)


@dataclass
class Bucket:
    tokens: int
    last_seen: float


class RateLimiter:
    """Per-key token bucket.

    Each key gets `rate` tokens. Every full `interval` elapsed since the
    bucket was last refilled adds another `rate` tokens, capped at `rate`.

    Usage:
        limiter = RateLimiter(5, 60.0)
        if not limiter.allow(request.client.host):
            ...  # 429
    """

    def __init__(
        self,
        rate: int,
        interval: float,
        *,
        name: str = "default",
        idle_seconds: float = config.RATE_LIMIT_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if rate <= 0 or interval <= 0:
            raise ValueError("rate and interval must be positive")
        self.rate = rate
        self.interval = interval
        self.name = name
        self.idle_seconds = idle_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._visitors: dict[str, Bucket] = {}

    def allow(self, key: str) -> bool:
        """Take one token for `key`. Returns False when the bucket is empty."""
        now = self._clock()
        with self._lock:
            bucket = self._visitors.get(key)
            if bucket is None:
                self._visitors[key] = Bucket(tokens=self.rate - 1, last_seen=now)
                return True

            refills = int((now - bucket.last_seen) // self.interval)
            if refills > 0:
                bucket.tokens = min(bucket.tokens + refills * self.rate, self.rate)
                bucket.last_seen = now

            if bucket.tokens <= 0:
                allowed = False
            else:
                bucket.tokens -= 1
                allowed = True

        if not allowed:
            logger.info(f"[{self.name}] rate limit hit for {key}")
        return allowed

    def cleanup(self) -> int:
        """Forget buckets idle for longer than `idle_seconds`. Returns how many were dropped."""
        now = self._clock()
        with self._lock:
            stale = [key for key, b in self._visitors.items() if now - b.last_seen > self.idle_seconds]
            for key in stale:
                del self._visitors[key]
        if stale:
            logger.debug(f"[{self.name}] evicted {len(stale)} idle rate-limit buckets")
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._visitors)
