import logging
from typing import Optional

from ...application.ports.rate_limiter import RateLimiter
from .memory_rate_limiter import InMemoryRateLimiter

logger = logging.getLogger(__name__)


def build_rate_limiter(redis_url: Optional[str]) -> RateLimiter:
    if redis_url:
        from .redis_rate_limiter import RedisRateLimiter
        logger.info("Using Redis rate limiter")
        return RedisRateLimiter(url=redis_url)
    logger.info("Using memory-based rate limiting")
    return InMemoryRateLimiter()
