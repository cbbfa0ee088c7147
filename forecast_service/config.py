"""
This module contains configuration settings for the application.
"""

from functools import lru_cache
from typing import Optional, List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from forecast_service.exceptions.common import ConfigurationError


class Settings(BaseSettings):
    """
    Application configuration using Pydantic BaseSettings.
    Automatically handles environment variable parsing and type conversion.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application settings
    app_name: str = "Forecast Dashboard API"
    app_version: str = "1.0.0"
    service_name: str = "forecast-dashboard"
    log_level: str = "INFO"
    default_city: str = "Phnom Penh"
    units: str = "metric"

    # Provider selection
    forecast_provider: Literal["openweathermap", "open-meteo"] = "openweathermap"
    uv_provider: Optional[Literal["openuv"]] = None

    # Provider endpoints and credentials
    openweathermap_base_url: str = "https://api.openweathermap.org/data/2.5"
    openweathermap_api_key: Optional[str] = None
    open_meteo_base_url: str = "https://api.open-meteo.com/v1/forecast"
    open_meteo_forecast_days: int = 7
    openuv_base_url: str = "https://api.openuv.io/api/v1"
    openuv_api_key: Optional[str] = None
    provider_timeout: int = 10
    # Seconds a pending UV lookup may hold back the forecast once it arrives
    uv_grace_period: float = 2.0

    # Series limits
    hourly_limit: int = 12
    daily_limit: int = 7

    # Outbound throttling, in `limits` notation
    provider_rate_limit: str = "60 per 1 minute"

    # Circuit breaker settings
    circuit_breaker_failure_threshold: int = 5
    circuit_breaker_recovery_timeout: int = 300

    # CORS settings
    cors_origins: List[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    def missing_credentials(self) -> List[str]:
        """
        List the credentials required by the selected providers that are not set.
        """
        missing = []
        if not self.openweathermap_api_key:
            missing.append("OPENWEATHERMAP_API_KEY")
        if self.uv_provider == "openuv" and not self.openuv_api_key:
            missing.append("OPENUV_API_KEY")
        return missing

    def require_credentials(self) -> None:
        """
        Fail before any fetch is attempted when a provider credential is absent.
        """
        missing = self.missing_credentials()
        if missing:
            raise ConfigurationError(
                f"Missing provider credentials: {', '.join(missing)}"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings.
    """
    return Settings()
