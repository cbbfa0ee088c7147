"""
This module defines schemas for API version 1.
"""

from datetime import date
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from forecast_service.definitions.data_sources import (
    ConditionCode,
    RequestState,
    UvUnavailable,
)


class ForecastSearchRequest(BaseModel):
    city: str = Field(..., max_length=100, description="City name to search for")


class CurrentPanel(BaseModel):
    """
    Headline block and air condition tiles.

    Temperatures are rounded half up for display. Raw values are kept
    alongside for clients that format on their own.
    """

    name: str = Field(..., description="City display name")
    headline_temperature: int = Field(..., description="Rounded temperature in °C")
    temperature: float = Field(..., description="Temperature in °C")
    real_feel: int = Field(..., description="Rounded feels like temperature in °C")
    humidity: int = Field(..., ge=0, le=100, description="Humidity percentage")
    wind_speed: float = Field(..., ge=0, description="Wind speed in m/s")
    precipitation: float = Field(..., ge=0, description="Rain over the last hour in mm")
    condition: ConditionCode


class HourlyTile(BaseModel):
    timestamp: int = Field(..., description="Epoch seconds")
    time_label: str = Field(..., description="Local time, e.g. '03:00 PM'")
    temperature: int
    condition: ConditionCode


class DailyRow(BaseModel):
    day: date
    weekday: str = Field(..., description="Short weekday name, e.g. 'Tue'")
    temperature_max: int
    temperature_min: int
    condition: ConditionCode
    uv_index: Optional[float] = None


class DashboardView(BaseModel):
    current: CurrentPanel
    hourly: List[HourlyTile]
    daily: List[DailyRow]
    uv_index: Union[float, UvUnavailable]


class ErrorBody(BaseModel):
    kind: str = Field(..., description="Error category")
    message: str = Field(..., description="Human-readable message")


class ForecastResponse(BaseModel):
    """
    Pipeline state as seen by the dashboard.

    ``dashboard`` is present only when ready, ``error`` only when failed.
    """

    state: RequestState
    city: Optional[str] = None
    sequence: int = 0
    dashboard: Optional[DashboardView] = None
    error: Optional[ErrorBody] = None


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service health status")
    version: str = Field(..., description="API version")
    timestamp: str = Field(..., description="Current timestamp")
    pipeline_state: RequestState = Field(..., description="Current request state")
    services: Dict[str, str] = Field(..., description="Provider circuit breaker states")
