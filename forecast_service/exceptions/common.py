class ForecastServiceException(Exception):
    """Base exception for the forecast service."""

    kind = "error"
    user_message = "Something went wrong while loading the forecast."

    def __init__(self, message: str):
        super().__init__(message)


class ConfigurationError(ForecastServiceException):
    """Raised at startup when the service configuration is unusable."""

    kind = "configuration_error"


class CityNotFound(ForecastServiceException):
    """Raised when the weather provider does not know the requested city."""

    kind = "city_not_found"

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"City not found: {query}")

    @property
    def user_message(self) -> str:
        return f'City "{self.query}" not found.'


class TransportError(ForecastServiceException):
    """Raised when a provider call fails on the network or returns an unreadable payload."""

    kind = "transport_error"
    user_message = "Unable to reach the weather service. Please try again."


class CircuitBreakerOpenException(TransportError):
    """Raised when circuit breaker is open."""


class ForecastUnavailable(ForecastServiceException):
    """Raised when the forecast fetch fails after current conditions succeeded."""

    kind = "forecast_unavailable"
    user_message = "Current conditions were found, but the forecast is unavailable right now."


class IncompleteData(ForecastServiceException):
    """Raised when the view-model cannot be assembled from the fetched parts."""

    kind = "incomplete_data"


class UnexpectedError(ForecastServiceException):
    """Raised in place of an error no other service exception describes."""

    kind = "unexpected_error"


class CycleCancelled(ForecastServiceException):
    """Recorded when a fetch cycle is cancelled before it settles."""

    kind = "cancelled"
    user_message = "Loading the forecast was interrupted. Please try again."
