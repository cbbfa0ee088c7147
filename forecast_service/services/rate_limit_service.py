"""
Outbound rate limiting for provider calls.
"""

from typing import Optional

from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter
from limits.util import parse_many

from forecast_service.config import get_settings
from forecast_service.utils.logger import setup_logger

logger = setup_logger(__name__)
settings = get_settings()


class RateLimitService:
    """
    Service keeping provider calls inside a moving window quota.

    Uses the 'limits' library with in-process storage. Each provider is
    tracked under its own identifier so one busy provider does not
    starve the others.
    """

    def __init__(self, rate_limit: Optional[str] = None):
        self.storage = MemoryStorage()
        self.limiter = MovingWindowRateLimiter(self.storage)

        self.rate_limit_str = rate_limit or settings.provider_rate_limit
        self.rate_limits = parse_many(self.rate_limit_str)

        logger.info(
            "Initialized outbound rate limiter",
            extra={"event": "rate_limiter_init", "limit": self.rate_limit_str},
        )

    async def get_rate_limit_remaining(self, identifier: str = "global") -> int:
        """
        Get remaining rate limit tokens for the given identifier.
        """
        rate_limit = self.rate_limits[0]
        stats = self.limiter.get_window_stats(rate_limit, identifier)
        return max(0, stats.remaining)

    async def consume_rate_limit_token(self, identifier: str = "global") -> bool:
        """
        Consume a rate limit token for the given identifier.
        """
        for rate_limit in self.rate_limits:
            if not self.limiter.hit(rate_limit, identifier):
                logger.warning(
                    "Rate limit exceeded",
                    extra={
                        "event": "rate_limit_exceeded",
                        "identifier": identifier,
                        "limit": str(rate_limit),
                    },
                )
                return False

        logger.debug(
            "Rate limit token consumed",
            extra={"event": "rate_limit_consumed", "identifier": identifier},
        )
        return True
