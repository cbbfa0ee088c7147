"""
FastAPI dependency injection providers.

This module builds the provider clients and the forecast pipeline from
settings, and exposes the pipeline owned by the running application to
route handlers.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from fastapi import Request

from forecast_service.config import Settings, get_settings
from forecast_service.services.current_weather_service import CurrentWeatherService
from forecast_service.services.external_api import ProviderClient
from forecast_service.services.forecast_series_service import ForecastSeriesService
from forecast_service.services.open_meteo import OpenMeteoClient
from forecast_service.services.openuv import OpenUVClient
from forecast_service.services.openweathermap import OpenWeatherMapClient
from forecast_service.services.pipeline import ForecastPipeline
from forecast_service.services.rate_limit_service import RateLimitService
from forecast_service.utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class PipelineResources:
    pipeline: ForecastPipeline
    clients: List[ProviderClient] = field(default_factory=list)

    async def close(self):
        for client in self.clients:
            await client.close()
        logger.info("Provider clients closed")


def build_pipeline(settings: Optional[Settings] = None) -> PipelineResources:
    """
    Create provider clients and the pipeline for the configured providers.

    Raises:
        ConfigurationError: a credential required by the selected providers is missing
    """
    settings = settings or get_settings()
    settings.require_credentials()

    rate_limiter = RateLimitService(settings.provider_rate_limit)

    owm_client = OpenWeatherMapClient(
        api_key=settings.openweathermap_api_key,
        base_url=settings.openweathermap_base_url,
        units=settings.units,
        rate_limiter=rate_limiter,
    )
    clients: List[ProviderClient] = [owm_client]

    if settings.forecast_provider == "open-meteo":
        forecast_provider = OpenMeteoClient(
            base_url=settings.open_meteo_base_url,
            forecast_days=settings.open_meteo_forecast_days,
            rate_limiter=rate_limiter,
        )
        clients.append(forecast_provider)
    else:
        forecast_provider = owm_client

    uv_provider = None
    if settings.uv_provider == "openuv":
        uv_provider = OpenUVClient(
            api_key=settings.openuv_api_key,
            base_url=settings.openuv_base_url,
            rate_limiter=rate_limiter,
        )
        clients.append(uv_provider)

    pipeline = ForecastPipeline(
        current_weather=CurrentWeatherService(owm_client),
        forecast_series=ForecastSeriesService(
            forecast_provider,
            uv_provider=uv_provider,
            hourly_limit=settings.hourly_limit,
            daily_limit=settings.daily_limit,
            uv_grace_period=settings.uv_grace_period,
        ),
    )

    logger.info(
        "Forecast pipeline initialized",
        extra={
            "event": "pipeline_init",
            "forecast_provider": settings.forecast_provider,
            "uv_provider": settings.uv_provider or "forecast",
        },
    )
    return PipelineResources(pipeline=pipeline, clients=clients)


async def get_pipeline(request: Request) -> ForecastPipeline:
    """
    Provide the pipeline owned by the running application.
    """
    return request.app.state.pipeline
