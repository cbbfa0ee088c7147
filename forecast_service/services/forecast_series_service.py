"""
This module fetches and shapes the hourly and daily forecast series.
"""

import asyncio
from datetime import datetime, date, time, timedelta, timezone, UTC
from typing import Callable, List, Optional, Protocol, Sequence, Tuple, Union

from forecast_service.config import get_settings
from forecast_service.definitions.data_sources import UV_UNAVAILABLE, UvUnavailable
from forecast_service.exceptions import ForecastUnavailable, TransportError
from forecast_service.models.weather import (
    CurrentConditions,
    DailySample,
    HourlySample,
    Location,
    ProviderForecast,
)
from forecast_service.utils.logger import setup_logger

logger = setup_logger(__name__)
settings = get_settings()

UvValue = Union[float, UvUnavailable]


class ForecastProvider(Protocol):
    async def fetch_forecast(self, location: Location) -> ProviderForecast:
        ...


class UvIndexProvider(Protocol):
    async def fetch_uv_index(self, location: Location) -> float:
        ...


def next_local_midnight(now: datetime, tz: timezone) -> datetime:
    local_now = now.astimezone(tz)
    return datetime.combine(local_now.date() + timedelta(days=1), time.min, tzinfo=tz)


def build_hourly_series(
    current: CurrentConditions,
    samples: Sequence[HourlySample],
    now: datetime,
    tz: timezone,
    limit: int,
) -> List[HourlySample]:
    """
    Hourly samples for the rest of the local day, led by a "now" sample.

    The first entry is synthesized from the current conditions. Provider
    samples are kept only when they fall strictly after ``now`` and before
    the next local midnight, ordered by time, one per timestamp.
    """
    start = now.timestamp()
    end = next_local_midnight(now, tz).timestamp()

    upcoming = {}
    for sample in samples:
        if start < sample.timestamp < end:
            upcoming.setdefault(sample.timestamp, sample)

    now_sample = HourlySample(
        timestamp=int(start),
        temperature=current.temperature,
        condition=current.condition,
    )
    series = [now_sample] + [upcoming[ts] for ts in sorted(upcoming)]
    return series[: max(limit, 1)]


def build_daily_series(
    samples: Sequence[DailySample], today: date, limit: int
) -> List[DailySample]:
    """One entry per day from ``today`` on, ascending, at most ``limit`` days."""
    by_day = {}
    for sample in samples:
        if sample.day >= today:
            by_day.setdefault(sample.day, sample)
    return [by_day[day] for day in sorted(by_day)][:limit]


class ForecastSeriesService:
    """
    Second step of a fetch cycle.

    Reads the forecast for resolved coordinates and shapes it for display.
    When an independent UV provider is configured its call runs alongside
    the forecast call and any failure there degrades to "unavailable".
    A failed forecast call ends the cycle with ``ForecastUnavailable``.
    """

    def __init__(
        self,
        provider: ForecastProvider,
        uv_provider: Optional[UvIndexProvider] = None,
        hourly_limit: Optional[int] = None,
        daily_limit: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
        uv_grace_period: Optional[float] = None,
    ):
        self.provider = provider
        self.uv_provider = uv_provider
        self.hourly_limit = hourly_limit or settings.hourly_limit
        self.daily_limit = daily_limit or settings.daily_limit
        self.clock = clock or (lambda: datetime.now(UTC))
        self.uv_grace_period = (
            settings.uv_grace_period if uv_grace_period is None else uv_grace_period
        )

    async def fetch(
        self, location: Location, current: CurrentConditions
    ) -> Tuple[List[HourlySample], List[DailySample], UvValue]:
        if not location.has_coordinates:
            raise ForecastUnavailable(f"No coordinates resolved for {location.city}")

        now = self.clock()
        uv_task = (
            asyncio.create_task(self._fetch_uv_index(location))
            if self.uv_provider
            else None
        )

        try:
            forecast = await self.provider.fetch_forecast(location)
            if uv_task:
                uv_index = await self._await_uv(uv_task, location)
            else:
                uv_index = self._provider_uv(forecast)
        except TransportError as e:
            logger.error(
                "Forecast fetch failed",
                extra={
                    "event": "forecast_failed",
                    "city": location.city,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise ForecastUnavailable(f"Forecast unavailable for {location.city}") from e
        finally:
            if uv_task and not uv_task.done():
                uv_task.cancel()

        tz = location.tzinfo
        hourly = build_hourly_series(
            current, forecast.hourly, now, tz, self.hourly_limit
        )
        daily = build_daily_series(
            forecast.daily, now.astimezone(tz).date(), self.daily_limit
        )

        logger.info(
            "Forecast series assembled",
            extra={
                "event": "forecast_succeeded",
                "city": location.city,
                "hourly_count": len(hourly),
                "daily_count": len(daily),
                "uv_index": uv_index,
            },
        )
        return hourly, daily, uv_index

    @staticmethod
    def _provider_uv(forecast: ProviderForecast) -> UvValue:
        return forecast.uv_index if forecast.uv_index is not None else UV_UNAVAILABLE

    async def _await_uv(self, uv_task: asyncio.Task, location: Location) -> UvValue:
        """
        Give the UV lookup a short grace period once the forecast is in.

        ``wait_for`` cancels the lookup when the period runs out.
        """
        try:
            return await asyncio.wait_for(uv_task, self.uv_grace_period)
        except asyncio.TimeoutError:
            logger.warning(
                "UV index not ready in time",
                extra={
                    "event": "uv_timeout",
                    "city": location.city,
                    "grace_period": self.uv_grace_period,
                },
            )
            return UV_UNAVAILABLE

    async def _fetch_uv_index(self, location: Location) -> UvValue:
        try:
            return await self.uv_provider.fetch_uv_index(location)
        except TransportError as e:
            logger.warning(
                "UV index unavailable",
                extra={
                    "event": "uv_unavailable",
                    "city": location.city,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return UV_UNAVAILABLE
