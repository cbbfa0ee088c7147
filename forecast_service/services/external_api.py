"""
Base HTTP client shared by the weather provider integrations.
"""

from typing import Optional, Dict, Any

import httpx

from forecast_service.config import get_settings
from forecast_service.exceptions import TransportError
from forecast_service.services.rate_limit_service import RateLimitService
from forecast_service.utils.circuit_breaker import CircuitBreaker
from forecast_service.utils.logger import setup_logger

logger = setup_logger(__name__)
settings = get_settings()


class ProviderClient:
    """
    Async HTTP client for one weather provider.

    Every request goes through the outbound rate limiter and the
    provider's circuit breaker. Network errors, 5xx responses and
    unreadable bodies surface as ``TransportError``. Client errors
    (4xx) are returned to the caller, which knows what they mean for
    its provider.
    """

    name = "provider"

    def __init__(
        self,
        base_url: str,
        rate_limiter: Optional[RateLimitService] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[int] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = rate_limiter
        self.headers = headers or {}
        self.client = http_client or httpx.AsyncClient(
            timeout=timeout or settings.provider_timeout
        )
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=settings.circuit_breaker_failure_threshold,
            recovery_timeout=settings.circuit_breaker_recovery_timeout,
            expected_exception=TransportError,
            name=self.name,
        )
        self._get = self.circuit_breaker(self._get)

    async def close(self):
        await self.client.aclose()

    async def _get(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        if self.rate_limiter and not await self.rate_limiter.consume_rate_limit_token(
            self.name
        ):
            raise TransportError(f"Outbound rate limit reached for {self.name}")

        url = f"{self.base_url}{path}"
        try:
            response = await self.client.get(url, params=params, headers=self.headers)
        except httpx.HTTPError as e:
            logger.error(
                "Provider request failed",
                extra={
                    "event": "provider_transport_error",
                    "provider": self.name,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise TransportError(f"{self.name} request failed: {e}") from e

        if response.status_code >= 500:
            logger.error(
                "Server error from provider",
                extra={
                    "event": "provider_server_error",
                    "provider": self.name,
                    "status_code": response.status_code,
                },
            )
            raise TransportError(
                f"{self.name} returned server error {response.status_code}"
            )

        return response

    def _json(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(f"{self.name} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise TransportError(f"{self.name} returned an unexpected payload")
        return data

    def _raise_for_client_error(self, response: httpx.Response) -> None:
        if response.status_code >= 400:
            logger.warning(
                "Client error from provider",
                extra={
                    "event": "provider_client_error",
                    "provider": self.name,
                    "status_code": response.status_code,
                },
            )
            raise TransportError(
                f"{self.name} rejected the request with status {response.status_code}"
            )
