"""
Tests for pipeline construction from settings.
"""

import pytest

from forecast_service.config import Settings
from forecast_service.exceptions import ConfigurationError
from forecast_service.services.open_meteo import OpenMeteoClient
from forecast_service.services.openuv import OpenUVClient
from forecast_service.services.openweathermap import OpenWeatherMapClient
from forecast_service.services.pipeline import ForecastPipeline
from forecast_service.utils.dependencies import build_pipeline


class TestBuildPipeline:
    """Test suite for provider wiring."""

    def test_missing_credential(self):
        """Test that no pipeline is built without the weather API key."""
        settings = Settings(_env_file=None, openweathermap_api_key=None)

        with pytest.raises(ConfigurationError):
            build_pipeline(settings)

    async def test_default_providers(self):
        settings = Settings(_env_file=None, openweathermap_api_key="key")

        resources = build_pipeline(settings)
        try:
            assert isinstance(resources.pipeline, ForecastPipeline)
            assert len(resources.clients) == 1
            owm_client = resources.clients[0]
            assert isinstance(owm_client, OpenWeatherMapClient)
            assert resources.pipeline.forecast_series.provider is owm_client
            assert resources.pipeline.forecast_series.uv_provider is None
        finally:
            await resources.close()

    async def test_open_meteo_with_openuv(self):
        settings = Settings(
            _env_file=None,
            openweathermap_api_key="key",
            forecast_provider="open-meteo",
            uv_provider="openuv",
            openuv_api_key="uv-key",
            hourly_limit=6,
        )

        resources = build_pipeline(settings)
        try:
            forecast_series = resources.pipeline.forecast_series
            assert isinstance(forecast_series.provider, OpenMeteoClient)
            assert isinstance(forecast_series.uv_provider, OpenUVClient)
            assert forecast_series.hourly_limit == 6
            assert len(resources.clients) == 3
        finally:
            await resources.close()
