"""
This module resolves a city name to current conditions and coordinates.
"""

from typing import Protocol, Tuple

from forecast_service.exceptions import CityNotFound, TransportError
from forecast_service.models.weather import CurrentConditions, Location
from forecast_service.utils.logger import setup_logger

logger = setup_logger(__name__)


class CurrentWeatherProvider(Protocol):
    async def fetch_current(self, city: str) -> Tuple[Location, CurrentConditions]:
        ...


def normalize_city(city_name: str) -> str:
    """Trim surrounding whitespace and collapse inner runs of it."""
    return " ".join((city_name or "").split())


class CurrentWeatherService:
    """
    First step of a fetch cycle.

    Issues a single lookup, without retries. ``CityNotFound`` and
    ``TransportError`` propagate to the caller, which decides how the
    cycle ends.
    """

    def __init__(self, provider: CurrentWeatherProvider):
        self.provider = provider

    async def lookup(self, city: str) -> Tuple[Location, CurrentConditions]:
        city = normalize_city(city)
        if not city:
            raise ValueError("City name must not be empty")

        logger.info(
            "Looking up current weather",
            extra={"event": "lookup_started", "city": city},
        )
        try:
            location, current = await self.provider.fetch_current(city)
        except CityNotFound:
            logger.info(
                "City not found",
                extra={"event": "city_not_found", "city": city},
            )
            raise
        except TransportError as e:
            logger.error(
                "Current weather lookup failed",
                extra={
                    "event": "lookup_failed",
                    "city": city,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise

        logger.info(
            "Current weather resolved",
            extra={
                "event": "lookup_succeeded",
                "city": city,
                "latitude": location.latitude,
                "longitude": location.longitude,
            },
        )
        return location, current
