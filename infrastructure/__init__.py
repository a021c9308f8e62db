"""Infrastructure helpers (event fan-out, rate limiting, background jobs).

Expose a small public surface used by routes and app startup. Route handlers
receive the process-wide instances through the `get_*` dependency functions.
"""
from typing import Optional

import config
from .broadcaster import Broadcaster, Subscriber
from .rate_limiter import RateLimiter, Bucket
from .scheduler import create_scheduler

__all__ = [
    "Broadcaster",
    "Subscriber",
    "RateLimiter",
    "Bucket",
    "create_scheduler",
    "get_broadcaster",
    "get_upload_limiter",
    "get_move_limiter",
]


_broadcaster: Optional[Broadcaster] = None
_upload_limiter: Optional[RateLimiter] = None
_move_limiter: Optional[RateLimiter] = None


def get_broadcaster() -> Broadcaster:
    global _broadcaster
    if _broadcaster is None:
        _broadcaster = Broadcaster()
    return _broadcaster


def get_upload_limiter() -> RateLimiter:
    global _upload_limiter
    if _upload_limiter is None:
        _upload_limiter = RateLimiter(config.UPLOAD_RATE, config.UPLOAD_INTERVAL, name="upload")
    return _upload_limiter


def get_move_limiter() -> RateLimiter:
    global _move_limiter
    if _move_limiter is None:
        _move_limiter = RateLimiter(config.MOVE_RATE, config.MOVE_INTERVAL, name="move")
    return _move_limiter
