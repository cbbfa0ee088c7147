"""
Open-Meteo integration: coordinate-based hourly and daily forecast.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, List

import httpx

from forecast_service.config import get_settings
from forecast_service.definitions.data_sources import ConditionCode, WMO_CONDITIONS
from forecast_service.models.weather import (
    DailySample,
    HourlySample,
    Location,
    ProviderForecast,
)
from forecast_service.exceptions import TransportError
from forecast_service.services.external_api import ProviderClient
from forecast_service.services.rate_limit_service import RateLimitService
from forecast_service.utils.logger import setup_logger

logger = setup_logger(__name__)
settings = get_settings()


def normalize_condition(code: Optional[int]) -> ConditionCode:
    """Map a WMO weather interpretation code onto a condition code."""
    if code is None:
        return ConditionCode.UNKNOWN
    condition = WMO_CONDITIONS.get(int(code))
    if condition is None:
        logger.warning(
            "Unknown WMO weather code",
            extra={"event": "unknown_weather_code", "code": code},
        )
        return ConditionCode.UNKNOWN
    return condition


def _column(block: Dict[str, Any], *names: str) -> List[Any]:
    """First present column among ``names``, padded to the block's time axis."""
    size = len(block.get("time") or [])
    for name in names:
        values = block.get(name)
        if values is not None:
            return list(values) + [None] * (size - len(values))
    return [None] * size


class OpenMeteoClient(ProviderClient):
    """
    Client for the Open-Meteo forecast API.

    Times are requested as unix timestamps together with the location's
    UTC offset, so daily entries can be placed on the location's calendar.
    """

    name = "open-meteo"

    def __init__(
        self,
        base_url: Optional[str] = None,
        forecast_days: Optional[int] = None,
        rate_limiter: Optional[RateLimitService] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            base_url or settings.open_meteo_base_url,
            rate_limiter=rate_limiter,
            http_client=http_client,
        )
        self.forecast_days = forecast_days or settings.open_meteo_forecast_days

    async def fetch_forecast(self, location: Location) -> ProviderForecast:
        response = await self._get(
            "",
            {
                "latitude": location.latitude,
                "longitude": location.longitude,
                "hourly": "temperature_2m,weather_code",
                "daily": "weather_code,temperature_2m_max,temperature_2m_min,uv_index_max",
                "timezone": "auto",
                "timeformat": "unixtime",
                "forecast_days": self.forecast_days,
            },
        )
        self._raise_for_client_error(response)
        data = self._json(response)

        try:
            return self._parse_forecast(location, data)
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"Malformed forecast payload: {e}") from e

    @staticmethod
    def _parse_forecast(location: Location, data: Dict[str, Any]) -> ProviderForecast:
        offset = data.get("utc_offset_seconds", location.utc_offset_seconds)
        tz = timezone(timedelta(seconds=offset))

        hourly_block = data.get("hourly") or {}
        hourly = []
        for timestamp, temperature, code in zip(
            hourly_block.get("time") or [],
            _column(hourly_block, "temperature_2m"),
            _column(hourly_block, "weather_code", "weathercode"),
        ):
            if temperature is None:
                continue
            hourly.append(
                HourlySample(
                    timestamp=int(timestamp),
                    temperature=temperature,
                    condition=normalize_condition(code),
                )
            )

        daily_block = data.get("daily") or {}
        daily = []
        for timestamp, code, high, low, uv_index in zip(
            daily_block.get("time") or [],
            _column(daily_block, "weather_code", "weathercode"),
            _column(daily_block, "temperature_2m_max"),
            _column(daily_block, "temperature_2m_min"),
            _column(daily_block, "uv_index_max"),
        ):
            if high is None or low is None:
                continue
            daily.append(
                DailySample(
                    day=datetime.fromtimestamp(int(timestamp), tz).date(),
                    temperature_max=high,
                    temperature_min=low,
                    condition=normalize_condition(code),
                    uv_index=uv_index,
                )
            )

        uv_index = daily[0].uv_index if daily else None
        return ProviderForecast(hourly=hourly, daily=daily, uv_index=uv_index)
