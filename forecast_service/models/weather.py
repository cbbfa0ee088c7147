from datetime import date, timedelta, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from forecast_service.definitions.data_sources import (
    ConditionCode,
    RequestState,
    UvUnavailable,
)


class Location(BaseModel):
    """A searched city and the coordinates resolved for it."""

    model_config = ConfigDict(frozen=True)

    city: str = Field(..., description="City name as submitted, trimmed")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    utc_offset_seconds: int = Field(0, description="Location offset from UTC")

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def tzinfo(self) -> timezone:
        return timezone(timedelta(seconds=self.utc_offset_seconds))


class CurrentConditions(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name reported by the provider")
    temperature: float = Field(..., description="Temperature in °C")
    feels_like: float = Field(..., description="Feels like temperature in °C")
    humidity: int = Field(..., ge=0, le=100, description="Humidity percentage")
    wind_speed: float = Field(..., ge=0, description="Wind speed in m/s")
    precipitation: float = Field(0.0, ge=0, description="Rain volume over the last hour in mm")
    condition: ConditionCode = Field(default=ConditionCode.UNKNOWN)
    observed_at: Optional[int] = Field(None, description="Observation time, epoch seconds")


class HourlySample(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(..., description="Epoch seconds")
    temperature: float
    condition: ConditionCode = Field(default=ConditionCode.UNKNOWN)


class DailySample(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date = Field(..., description="Calendar day in the location's timezone")
    temperature_max: float
    temperature_min: float
    condition: ConditionCode = Field(default=ConditionCode.UNKNOWN)
    uv_index: Optional[float] = Field(None, ge=0)


class ProviderForecast(BaseModel):
    """Hourly and daily series as normalized from a single provider response."""

    hourly: List[HourlySample] = Field(default_factory=list)
    daily: List[DailySample] = Field(default_factory=list)
    uv_index: Optional[float] = Field(None, ge=0)


class ForecastViewModel(BaseModel):
    """The merged structure handed to the presentation layer."""

    model_config = ConfigDict(frozen=True)

    location: Location
    current: CurrentConditions
    hourly: List[HourlySample] = Field(default_factory=list)
    daily: List[DailySample] = Field(default_factory=list)
    uv_index: Union[float, UvUnavailable] = Field(..., description="UV index or 'unavailable'")


class PipelineSnapshot(BaseModel):
    """Read-only view of the pipeline for the presentation layer."""

    state: RequestState
    city: Optional[str] = None
    sequence: int = 0
    view_model: Optional[ForecastViewModel] = None
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
