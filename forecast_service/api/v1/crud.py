import math
from datetime import datetime

from forecast_service.models.weather import ForecastViewModel, PipelineSnapshot
from forecast_service.schemas.api_v1 import (
    CurrentPanel,
    DailyRow,
    DashboardView,
    ErrorBody,
    ForecastResponse,
    HourlyTile,
)


def round_half_up(value: float) -> int:
    """Round for display the way the dashboard shows temperatures (31.5 -> 32)."""
    return math.floor(value + 0.5)


class ForecastCRUD:

    @staticmethod
    def transform_view_model(view_model: ForecastViewModel) -> DashboardView:
        """
        Transform the view-model into display-ready values.
        """
        current = view_model.current
        tz = view_model.location.tzinfo

        panel = CurrentPanel(
            name=current.name,
            headline_temperature=round_half_up(current.temperature),
            temperature=current.temperature,
            real_feel=round_half_up(current.feels_like),
            humidity=current.humidity,
            wind_speed=current.wind_speed,
            precipitation=current.precipitation,
            condition=current.condition,
        )

        hourly = [
            HourlyTile(
                timestamp=sample.timestamp,
                time_label=datetime.fromtimestamp(sample.timestamp, tz).strftime("%I:%M %p"),
                temperature=round_half_up(sample.temperature),
                condition=sample.condition,
            )
            for sample in view_model.hourly
        ]

        daily = [
            DailyRow(
                day=sample.day,
                weekday=sample.day.strftime("%a"),
                temperature_max=round_half_up(sample.temperature_max),
                temperature_min=round_half_up(sample.temperature_min),
                condition=sample.condition,
                uv_index=sample.uv_index,
            )
            for sample in view_model.daily
        ]

        return DashboardView(
            current=panel, hourly=hourly, daily=daily, uv_index=view_model.uv_index
        )

    @staticmethod
    def transform_snapshot(snapshot: PipelineSnapshot) -> ForecastResponse:
        """
        Transform a pipeline snapshot into the API response.
        """
        dashboard = None
        if snapshot.view_model is not None:
            dashboard = ForecastCRUD.transform_view_model(snapshot.view_model)

        error = None
        if snapshot.error_kind is not None:
            error = ErrorBody(kind=snapshot.error_kind, message=snapshot.error_message)

        return ForecastResponse(
            state=snapshot.state,
            city=snapshot.city,
            sequence=snapshot.sequence,
            dashboard=dashboard,
            error=error,
        )
