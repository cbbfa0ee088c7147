"""
This module merges fetched parts into the dashboard view-model.
"""

from typing import Optional, Sequence, Union

from forecast_service.definitions.data_sources import UV_UNAVAILABLE, UvUnavailable
from forecast_service.exceptions import IncompleteData
from forecast_service.models.weather import (
    CurrentConditions,
    DailySample,
    ForecastViewModel,
    HourlySample,
    Location,
)


def merge_view_model(
    location: Optional[Location],
    current: Optional[CurrentConditions],
    hourly: Sequence[HourlySample],
    daily: Sequence[DailySample],
    uv_index: Union[float, UvUnavailable, None] = None,
) -> ForecastViewModel:
    """
    Combine current conditions and forecast series into one view-model.

    Empty hourly or daily series are accepted and rendered as "no data".
    Current conditions carry the headline temperature, so they are required.
    """
    if current is None:
        raise IncompleteData("Current conditions are missing")
    if location is None:
        raise IncompleteData("Location is missing")

    return ForecastViewModel(
        location=location,
        current=current,
        hourly=list(hourly or []),
        daily=list(daily or []),
        uv_index=UV_UNAVAILABLE if uv_index is None else uv_index,
    )
