"""
OpenUV integration: coordinate-based UV index.
"""

from typing import Optional

import httpx

from forecast_service.config import get_settings
from forecast_service.exceptions import TransportError
from forecast_service.models.weather import Location
from forecast_service.services.external_api import ProviderClient
from forecast_service.services.rate_limit_service import RateLimitService

settings = get_settings()


class OpenUVClient(ProviderClient):
    name = "openuv"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        rate_limiter: Optional[RateLimitService] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            base_url or settings.openuv_base_url,
            rate_limiter=rate_limiter,
            http_client=http_client,
            headers={"x-access-token": api_key},
        )

    async def fetch_uv_index(self, location: Location) -> float:
        response = await self._get(
            "/uv", {"lat": location.latitude, "lng": location.longitude}
        )
        self._raise_for_client_error(response)
        data = self._json(response)

        try:
            return float(data["result"]["uv"])
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"Malformed UV payload: {e}") from e
