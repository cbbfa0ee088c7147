"""Forecast service exceptions."""

from .common import (
    ForecastServiceException,
    ConfigurationError,
    CityNotFound,
    TransportError,
    CircuitBreakerOpenException,
    ForecastUnavailable,
    IncompleteData,
    UnexpectedError,
    CycleCancelled,
)

__all__ = [
    "ForecastServiceException",
    "ConfigurationError",
    "CityNotFound",
    "TransportError",
    "CircuitBreakerOpenException",
    "ForecastUnavailable",
    "IncompleteData",
    "UnexpectedError",
    "CycleCancelled",
]
