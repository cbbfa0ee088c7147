"""
Tests for the forecast pipeline lifecycle.
"""

import asyncio
from datetime import date
from unittest.mock import AsyncMock

import pytest

from forecast_service.definitions.data_sources import RequestState, UV_UNAVAILABLE
from forecast_service.exceptions import CityNotFound, ForecastUnavailable, TransportError
from forecast_service.models.weather import (
    CurrentConditions,
    DailySample,
    HourlySample,
    Location,
)
from forecast_service.services.pipeline import ForecastPipeline


def conditions_for(city: str, temperature: float) -> CurrentConditions:
    return CurrentConditions(
        name=city, temperature=temperature, feels_like=temperature, humidity=50, wind_speed=1.0
    )


@pytest.fixture
def series():
    hourly = [HourlySample(timestamp=1748746800, temperature=31.4)]
    daily = [DailySample(day=date(2025, 6, 1), temperature_max=34, temperature_min=24)]
    return hourly, daily, 8.2


@pytest.fixture
def current_weather(phnom_penh, current_conditions):
    service = AsyncMock()
    service.lookup.return_value = (phnom_penh, current_conditions)
    return service


@pytest.fixture
def forecast_series(series):
    service = AsyncMock()
    service.fetch.return_value = series
    return service


@pytest.fixture
def pipeline(current_weather, forecast_series):
    return ForecastPipeline(current_weather, forecast_series)


class TestForecastPipeline:
    """Test cases for ForecastPipeline."""

    def test_initial_state(self, pipeline):
        snapshot = pipeline.snapshot()

        assert snapshot.state == RequestState.IDLE
        assert snapshot.view_model is None
        assert snapshot.sequence == 0

    async def test_ready(self, pipeline, current_weather, forecast_series, phnom_penh):
        snapshot = await pipeline.request_forecast("  Phnom Penh ")

        assert snapshot.state == RequestState.READY
        assert snapshot.city == "Phnom Penh"
        assert snapshot.sequence == 1
        assert snapshot.error_kind is None
        assert snapshot.view_model.current.temperature == 31.4
        assert snapshot.view_model.uv_index == 8.2
        assert len(snapshot.view_model.daily) == 1
        current_weather.lookup.assert_awaited_once_with("Phnom Penh")
        forecast_series.fetch.assert_awaited_once()
        assert forecast_series.fetch.await_args.args[0] == phnom_penh

    @pytest.mark.parametrize("blank", ["", "   ", "\t\n"])
    async def test_blank_input_is_noop(self, pipeline, current_weather, blank):
        await pipeline.request_forecast("Phnom Penh")
        before = pipeline.snapshot()

        snapshot = await pipeline.request_forecast(blank)

        assert snapshot == before
        assert current_weather.lookup.await_count == 1

    async def test_blank_input_from_idle(self, pipeline, current_weather):
        snapshot = await pipeline.request_forecast(" ")

        assert snapshot.state == RequestState.IDLE
        current_weather.lookup.assert_not_called()

    async def test_city_not_found(self, pipeline, current_weather, forecast_series):
        current_weather.lookup.side_effect = CityNotFound("Atlantis")

        snapshot = await pipeline.request_forecast("Atlantis")

        assert snapshot.state == RequestState.FAILED
        assert snapshot.error_kind == "city_not_found"
        assert "Atlantis" in snapshot.error_message
        assert snapshot.view_model is None
        forecast_series.fetch.assert_not_called()

    async def test_transport_error(self, pipeline, current_weather):
        current_weather.lookup.side_effect = TransportError("timeout")

        snapshot = await pipeline.request_forecast("Paris")

        assert snapshot.state == RequestState.FAILED
        assert snapshot.error_kind == "transport_error"

    async def test_forecast_unavailable_keeps_previous_view_model(
        self, pipeline, forecast_series
    ):
        """Test that a failed cycle is not half-applied to the stored view-model."""
        await pipeline.request_forecast("Phnom Penh")
        previous = pipeline.view_model
        forecast_series.fetch.side_effect = ForecastUnavailable("down")

        snapshot = await pipeline.request_forecast("Paris")

        assert snapshot.state == RequestState.FAILED
        assert snapshot.error_kind == "forecast_unavailable"
        assert snapshot.view_model is None
        assert pipeline.view_model is previous

    async def test_incomplete_data(self, pipeline, current_weather, phnom_penh):
        current_weather.lookup.return_value = (phnom_penh, None)

        snapshot = await pipeline.request_forecast("Phnom Penh")

        assert snapshot.state == RequestState.FAILED
        assert snapshot.error_kind == "incomplete_data"

    async def test_recovers_after_failure(self, pipeline, current_weather, phnom_penh, current_conditions):
        current_weather.lookup.side_effect = [
            CityNotFound("Atlantis"),
            (phnom_penh, current_conditions),
        ]

        failed = await pipeline.request_forecast("Atlantis")
        ready = await pipeline.request_forecast("Phnom Penh")

        assert failed.state == RequestState.FAILED
        assert ready.state == RequestState.READY
        assert ready.error_message is None

    async def test_uv_unavailable_is_still_ready(self, pipeline, forecast_series, series):
        hourly, daily, _ = series
        forecast_series.fetch.return_value = (hourly, daily, UV_UNAVAILABLE)

        snapshot = await pipeline.request_forecast("Phnom Penh")

        assert snapshot.state == RequestState.READY
        assert snapshot.view_model.uv_index == "unavailable"
        assert snapshot.view_model.hourly
        assert snapshot.view_model.daily

    async def test_stale_response_discarded(self, pipeline, current_weather):
        """Test that a slow earlier search cannot overwrite a later one."""
        release_phnom_penh = asyncio.Event()
        locations = {
            "Phnom Penh": Location(city="Phnom Penh", latitude=11.56, longitude=104.92),
            "Paris": Location(city="Paris", latitude=48.85, longitude=2.35),
        }

        async def lookup(city):
            if city == "Phnom Penh":
                await release_phnom_penh.wait()
                return locations[city], conditions_for(city, 31.4)
            return locations[city], conditions_for(city, 14.0)

        current_weather.lookup.side_effect = lookup

        first = asyncio.create_task(pipeline.request_forecast("Phnom Penh"))
        await asyncio.sleep(0)
        assert pipeline.state == RequestState.LOADING

        paris = await pipeline.request_forecast("Paris")
        assert paris.state == RequestState.READY
        assert paris.view_model.current.name == "Paris"

        release_phnom_penh.set()
        await first

        final = pipeline.snapshot()
        assert final.state == RequestState.READY
        assert final.city == "Paris"
        assert final.sequence == 2
        assert final.view_model.current.name == "Paris"
        assert final.view_model.location.city == "Paris"

    async def test_stale_failure_discarded(self, pipeline, current_weather):
        """Test that a late error from a superseded search is ignored."""
        release_first = asyncio.Event()

        async def lookup(city):
            if city == "Atlantis":
                await release_first.wait()
                raise CityNotFound(city)
            return Location(city=city, latitude=48.85, longitude=2.35), conditions_for(city, 14.0)

        current_weather.lookup.side_effect = lookup

        first = asyncio.create_task(pipeline.request_forecast("Atlantis"))
        await asyncio.sleep(0)
        await pipeline.request_forecast("Paris")
        release_first.set()
        await first

        assert pipeline.state == RequestState.READY
        assert pipeline.snapshot().error_kind is None

    async def test_unexpected_error_fails_cycle(self, pipeline, current_weather):
        """Test that an error outside the service hierarchy still settles the cycle."""
        current_weather.lookup.side_effect = RuntimeError("boom")

        snapshot = await pipeline.request_forecast("Paris")

        assert snapshot.state == RequestState.FAILED
        assert snapshot.error_kind == "unexpected_error"
        assert snapshot.error_message
        assert snapshot.view_model is None

    async def test_unexpected_error_in_forecast_step(self, pipeline, forecast_series):
        forecast_series.fetch.side_effect = ValueError("bad offset")

        snapshot = await pipeline.request_forecast("Phnom Penh")

        assert snapshot.state == RequestState.FAILED
        assert snapshot.error_kind == "unexpected_error"

    async def test_cancelled_cycle_does_not_stay_loading(self, pipeline, current_weather):
        """Test that cancelling an in-flight cycle leaves the pipeline failed."""
        lookup_started = asyncio.Event()

        async def lookup(city):
            lookup_started.set()
            await asyncio.sleep(10)

        current_weather.lookup.side_effect = lookup

        task = asyncio.create_task(pipeline.request_forecast("Paris"))
        await lookup_started.wait()
        assert pipeline.state == RequestState.LOADING

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        snapshot = pipeline.snapshot()
        assert snapshot.state == RequestState.FAILED
        assert snapshot.error_kind == "cancelled"

    async def test_cancelled_superseded_cycle_keeps_latest(self, pipeline, current_weather):
        """Test that cancelling an older cycle does not touch a newer result."""
        lookup_started = asyncio.Event()

        async def lookup(city):
            if city == "Atlantis":
                lookup_started.set()
                await asyncio.sleep(10)
            return Location(city=city, latitude=48.85, longitude=2.35), conditions_for(city, 14.0)

        current_weather.lookup.side_effect = lookup

        task = asyncio.create_task(pipeline.request_forecast("Atlantis"))
        await lookup_started.wait()
        await pipeline.request_forecast("Paris")

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        snapshot = pipeline.snapshot()
        assert snapshot.state == RequestState.READY
        assert snapshot.city == "Paris"
