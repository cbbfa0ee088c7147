"""
Services package initialization.
"""

from forecast_service.services.current_weather_service import CurrentWeatherService
from forecast_service.services.forecast_series_service import ForecastSeriesService
from forecast_service.services.open_meteo import OpenMeteoClient
from forecast_service.services.openuv import OpenUVClient
from forecast_service.services.openweathermap import OpenWeatherMapClient
from forecast_service.services.pipeline import ForecastPipeline
from forecast_service.services.rate_limit_service import RateLimitService
from forecast_service.services.view_model import merge_view_model

__all__ = [
    "CurrentWeatherService",
    "ForecastSeriesService",
    "OpenMeteoClient",
    "OpenUVClient",
    "OpenWeatherMapClient",
    "ForecastPipeline",
    "RateLimitService",
    "merge_view_model",
]
