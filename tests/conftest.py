"""
Common test fixtures and configuration.
"""

from datetime import datetime, timedelta, UTC
from typing import Callable

import httpx
import pytest

from forecast_service.definitions.data_sources import ConditionCode
from forecast_service.models.weather import CurrentConditions, Location

PHNOM_PENH_OFFSET = 7 * 3600


@pytest.fixture
def fixed_now() -> datetime:
    """10:00 local time in Phnom Penh (UTC+7) on 2025-06-01."""
    return datetime(2025, 6, 1, 3, 0, tzinfo=UTC)


@pytest.fixture
def local_midnight(fixed_now) -> datetime:
    """Start of 2025-06-01 in Phnom Penh, as an aware UTC datetime."""
    return datetime(2025, 5, 31, 17, 0, tzinfo=UTC)


@pytest.fixture
def phnom_penh() -> Location:
    return Location(
        city="Phnom Penh",
        latitude=11.5625,
        longitude=104.916,
        utc_offset_seconds=PHNOM_PENH_OFFSET,
    )


@pytest.fixture
def current_conditions(fixed_now) -> CurrentConditions:
    return CurrentConditions(
        name="Phnom Penh",
        temperature=31.4,
        feels_like=36.2,
        humidity=70,
        wind_speed=3.1,
        precipitation=0.5,
        condition=ConditionCode.CLOUDS,
        observed_at=int(fixed_now.timestamp()) - 300,
    )


@pytest.fixture
def current_payload(fixed_now) -> dict:
    """OpenWeatherMap /weather response for Phnom Penh."""
    return {
        "coord": {"lon": 104.916, "lat": 11.5625},
        "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds"}],
        "main": {"temp": 31.4, "feels_like": 36.2, "humidity": 70, "pressure": 1008},
        "wind": {"speed": 3.1, "deg": 200},
        "rain": {"1h": 0.5},
        "dt": int(fixed_now.timestamp()) - 300,
        "timezone": PHNOM_PENH_OFFSET,
        "name": "Phnom Penh",
        "cod": 200,
    }


@pytest.fixture
def one_call_payload(fixed_now, local_midnight) -> dict:
    """
    OpenWeatherMap /onecall response.

    Hourly entries start one hour before ``fixed_now`` and run for 48 hours.
    Daily entries cover 10 days from the local today, stamped at local noon.
    """
    first_hour = fixed_now - timedelta(hours=1)
    hourly = [
        {
            "dt": int((first_hour + timedelta(hours=i)).timestamp()),
            "temp": 30.0 + i % 5,
            "weather": [{"main": "Rain" if i % 2 else "Clear"}],
            "uvi": 7.5 if i == 0 else 5.0,
        }
        for i in range(48)
    ]
    daily = [
        {
            "dt": int((local_midnight + timedelta(days=i, hours=12)).timestamp()),
            "temp": {"min": 24.0 + i * 0.1, "max": 34.0 + i * 0.1},
            "weather": [{"main": "Thunderstorm"}],
            "uvi": 9.0,
        }
        for i in range(10)
    ]
    return {
        "lat": 11.5625,
        "lon": 104.916,
        "timezone_offset": PHNOM_PENH_OFFSET,
        "current": {"dt": int(fixed_now.timestamp()), "temp": 31.4, "uvi": 8.2},
        "hourly": hourly,
        "daily": daily,
    }


@pytest.fixture
def mock_http_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def factory(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
