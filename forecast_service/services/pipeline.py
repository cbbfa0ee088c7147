"""
This module owns the forecast request lifecycle.
"""

import asyncio
from typing import Optional

from forecast_service.definitions.data_sources import RequestState
from forecast_service.exceptions import (
    CycleCancelled,
    ForecastServiceException,
    IncompleteData,
    UnexpectedError,
)
from forecast_service.models.weather import ForecastViewModel, PipelineSnapshot
from forecast_service.services.current_weather_service import (
    CurrentWeatherService,
    normalize_city,
)
from forecast_service.services.forecast_series_service import ForecastSeriesService
from forecast_service.services.view_model import merge_view_model
from forecast_service.utils.logger import setup_logger

logger = setup_logger(__name__)


class ForecastPipeline:
    """
    Runs fetch cycles and holds the state read by the presentation layer.

    States move Idle -> Loading -> Ready | Failed, and back to Loading on
    the next city request. Every cycle is tagged with an increasing
    sequence number. A cycle that finishes after a newer one has started
    is discarded, so a slow response never overwrites a fresh one.
    """

    def __init__(
        self,
        current_weather: CurrentWeatherService,
        forecast_series: ForecastSeriesService,
    ):
        self.current_weather = current_weather
        self.forecast_series = forecast_series

        self.state = RequestState.IDLE
        self.city: Optional[str] = None
        self.view_model: Optional[ForecastViewModel] = None
        self.error: Optional[ForecastServiceException] = None
        self._sequence = 0

    @property
    def sequence(self) -> int:
        return self._sequence

    def snapshot(self) -> PipelineSnapshot:
        """
        Current state for rendering.

        The view-model is only exposed when ready, and the error only when
        failed, so a caller never sees a half-filled cycle.
        """
        return PipelineSnapshot(
            state=self.state,
            city=self.city,
            sequence=self._sequence,
            view_model=self.view_model if self.state == RequestState.READY else None,
            error_kind=self.error.kind if self.state == RequestState.FAILED else None,
            error_message=(
                self.error.user_message if self.state == RequestState.FAILED else None
            ),
        )

    async def request_forecast(self, city_name: str) -> PipelineSnapshot:
        """
        Start a fetch cycle for ``city_name`` and wait for it to settle.

        Blank input is ignored and leaves the state untouched.
        """
        city = normalize_city(city_name)
        if not city:
            logger.debug("Ignoring blank city request", extra={"event": "blank_city"})
            return self.snapshot()

        self._sequence += 1
        sequence = self._sequence
        self.state = RequestState.LOADING
        self.city = city
        self.error = None

        logger.info(
            "Fetch cycle started",
            extra={"event": "cycle_started", "city": city, "sequence": sequence},
        )

        view_model = None
        error = None
        try:
            view_model = await self._run_cycle(city)
        except asyncio.CancelledError:
            logger.warning(
                "Fetch cycle cancelled",
                extra={"event": "cycle_cancelled", "city": city, "sequence": sequence},
            )
            if sequence == self._sequence and self.state == RequestState.LOADING:
                self.state = RequestState.FAILED
                self.error = CycleCancelled(f"Fetch cycle for {city} cancelled")
            raise
        except IncompleteData as e:
            logger.error(
                "Fetched data could not be assembled",
                exc_info=True,
                extra={"event": "incomplete_data", "city": city, "sequence": sequence},
            )
            error = e
        except ForecastServiceException as e:
            logger.warning(
                "Fetch cycle failed",
                extra={
                    "event": "cycle_failed",
                    "city": city,
                    "sequence": sequence,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            error = e
        except Exception as e:
            logger.error(
                "Unexpected error in fetch cycle",
                exc_info=True,
                extra={
                    "event": "cycle_error",
                    "city": city,
                    "sequence": sequence,
                    "error_type": type(e).__name__,
                },
            )
            error = UnexpectedError(f"{type(e).__name__}: {e}")

        if sequence != self._sequence:
            logger.info(
                "Discarding superseded fetch cycle",
                extra={
                    "event": "cycle_discarded",
                    "city": city,
                    "sequence": sequence,
                    "latest_sequence": self._sequence,
                },
            )
            return self.snapshot()

        if error is not None:
            self.state = RequestState.FAILED
            self.error = error
        else:
            self.state = RequestState.READY
            self.view_model = view_model
            logger.info(
                "Fetch cycle ready",
                extra={"event": "cycle_ready", "city": city, "sequence": sequence},
            )
        return self.snapshot()

    async def _run_cycle(self, city: str) -> ForecastViewModel:
        location, current = await self.current_weather.lookup(city)
        hourly, daily, uv_index = await self.forecast_series.fetch(location, current)
        return merge_view_model(location, current, hourly, daily, uv_index)
