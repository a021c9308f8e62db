import logging
from typing import Iterable

from apscheduler.schedulers.background import BackgroundScheduler
from pytz import utc

import config
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


def _cleanup_job(limiter: RateLimiter) -> None:
    # A failing sweep must never take the scheduler thread down.
    try:
        limiter.cleanup()
    except Exception as exc:
        logger.error(f"[{limiter.name}] rate limiter cleanup failed: {exc}", exc_info=True)


def create_scheduler(
    limiters: Iterable[RateLimiter],
    *,
    interval_seconds: int = config.RATE_LIMIT_CLEANUP_SECONDS,
) -> BackgroundScheduler:
    """Build (but do not start) the scheduler that sweeps idle rate-limit buckets."""
    scheduler = BackgroundScheduler(timezone=utc)
    for limiter in limiters:
        scheduler.add_job(
            _cleanup_job,
            trigger="interval",
            seconds=interval_seconds,
            args=[limiter],
            id=f"rate-limit-cleanup-{limiter.name}",
            coalesce=True,
            max_instances=1,
        )
    return scheduler
