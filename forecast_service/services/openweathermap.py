"""
OpenWeatherMap integration: current weather lookup and One Call forecast.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Tuple

import httpx

from forecast_service.config import get_settings
from forecast_service.definitions.data_sources import ConditionCode, OWM_CONDITIONS
from forecast_service.exceptions import CityNotFound, TransportError
from forecast_service.models.weather import (
    CurrentConditions,
    DailySample,
    HourlySample,
    Location,
    ProviderForecast,
)
from forecast_service.services.external_api import ProviderClient
from forecast_service.services.rate_limit_service import RateLimitService
from forecast_service.utils.logger import setup_logger

logger = setup_logger(__name__)
settings = get_settings()


def normalize_condition(main: Optional[str]) -> ConditionCode:
    """Map an OpenWeatherMap ``weather[].main`` group onto a condition code."""
    if not main:
        return ConditionCode.UNKNOWN
    return OWM_CONDITIONS.get(main.strip().lower(), ConditionCode.OTHER)


def _weather_main(entry: Dict[str, Any]) -> Optional[str]:
    weather = entry.get("weather") or []
    return weather[0].get("main") if weather else None


class OpenWeatherMapClient(ProviderClient):
    """
    Client for the OpenWeatherMap 2.5 API.

    ``fetch_current`` resolves a city name to current conditions and
    coordinates. ``fetch_forecast`` reads the One Call hourly and daily
    series for those coordinates.
    """

    name = "openweathermap"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        units: Optional[str] = None,
        rate_limiter: Optional[RateLimitService] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            base_url or settings.openweathermap_base_url,
            rate_limiter=rate_limiter,
            http_client=http_client,
        )
        self.api_key = api_key
        self.units = units or settings.units

    async def fetch_current(self, city: str) -> Tuple[Location, CurrentConditions]:
        response = await self._get(
            "/weather", {"q": city, "appid": self.api_key, "units": self.units}
        )
        if response.status_code == 404:
            raise CityNotFound(city)

        data = self._json(response)
        if str(data.get("cod")) == "404":
            raise CityNotFound(city)
        self._raise_for_client_error(response)
        if str(data.get("cod")) != "200":
            raise TransportError(
                f"{self.name} reported status {data.get('cod')}: {data.get('message')}"
            )

        try:
            return self._parse_current(city, data)
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"Malformed current weather payload: {e}") from e

    async def fetch_forecast(self, location: Location) -> ProviderForecast:
        response = await self._get(
            "/onecall",
            {
                "lat": location.latitude,
                "lon": location.longitude,
                "exclude": "minutely,alerts",
                "units": self.units,
                "appid": self.api_key,
            },
        )
        self._raise_for_client_error(response)
        data = self._json(response)

        try:
            return self._parse_one_call(location, data)
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"Malformed forecast payload: {e}") from e

    @staticmethod
    def _parse_current(
        city: str, data: Dict[str, Any]
    ) -> Tuple[Location, CurrentConditions]:
        main = data["main"]
        coord = data["coord"]
        rain = data.get("rain") or {}
        wind = data.get("wind") or {}

        location = Location(
            city=city,
            latitude=coord.get("lat"),
            longitude=coord.get("lon"),
            utc_offset_seconds=data.get("timezone") or 0,
        )
        current = CurrentConditions(
            name=data.get("name") or city,
            temperature=main["temp"],
            feels_like=main.get("feels_like", main["temp"]),
            humidity=main.get("humidity", 0),
            wind_speed=wind.get("speed", 0.0),
            precipitation=rain.get("1h", 0.0),
            condition=normalize_condition(_weather_main(data)),
            observed_at=data.get("dt"),
        )
        return location, current

    @staticmethod
    def _parse_one_call(location: Location, data: Dict[str, Any]) -> ProviderForecast:
        raw_hourly = data.get("hourly") or []
        raw_daily = data.get("daily") or []
        tz = location.tzinfo
        if "timezone_offset" in data:
            tz = timezone(timedelta(seconds=data["timezone_offset"]))

        hourly = [
            HourlySample(
                timestamp=int(entry["dt"]),
                temperature=entry["temp"],
                condition=normalize_condition(_weather_main(entry)),
            )
            for entry in raw_hourly
        ]
        daily = [
            DailySample(
                day=datetime.fromtimestamp(entry["dt"], tz).date(),
                temperature_max=entry["temp"]["max"],
                temperature_min=entry["temp"]["min"],
                condition=normalize_condition(_weather_main(entry)),
                uv_index=entry.get("uvi"),
            )
            for entry in raw_daily
        ]

        uv_index = (data.get("current") or {}).get("uvi")
        if uv_index is None and raw_hourly:
            uv_index = raw_hourly[0].get("uvi")

        return ProviderForecast(hourly=hourly, daily=daily, uv_index=uv_index)
