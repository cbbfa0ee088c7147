"""
This module defines the routes for API version 1.
"""

from datetime import datetime, UTC

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from forecast_service.api.v1.crud import ForecastCRUD
from forecast_service.config import get_settings
from forecast_service.definitions.data_sources import ApiVersion, RequestState
from forecast_service.schemas.api_v1 import (
    ForecastResponse,
    ForecastSearchRequest,
    HealthResponse,
)
from forecast_service.services.pipeline import ForecastPipeline
from forecast_service.utils.circuit_breaker import circuit_breaker_states
from forecast_service.utils.dependencies import get_pipeline
from forecast_service.utils.logger import setup_logger

logger = setup_logger(__name__)
settings = get_settings()

router = APIRouter(prefix=f"/{ApiVersion.V1.value}", tags=[ApiVersion.V1.value])

ERROR_STATUS_CODES = {
    "city_not_found": 404,
    "transport_error": 502,
    "forecast_unavailable": 502,
    "incomplete_data": 500,
    "unexpected_error": 500,
}


@router.get("/forecast", response_model=ForecastResponse)
async def get_forecast(
    pipeline: ForecastPipeline = Depends(get_pipeline),
) -> ForecastResponse:
    """
    Get the current dashboard state.

    Returns the assembled dashboard when ready, the error message when the
    last search failed, or just the state while a search is loading.
    """
    return ForecastCRUD.transform_snapshot(pipeline.snapshot())


@router.post("/forecast/search", response_model=ForecastResponse)
async def search_forecast(
    search: ForecastSearchRequest,
    pipeline: ForecastPipeline = Depends(get_pipeline),
):
    """
    Search for a city and wait for its fetch cycle to settle.

    A blank search is ignored and the current state is returned unchanged.
    """
    snapshot = await pipeline.request_forecast(search.city)
    response = ForecastCRUD.transform_snapshot(snapshot)

    if response.state == RequestState.FAILED and response.error:
        return JSONResponse(
            status_code=ERROR_STATUS_CODES.get(response.error.kind, 500),
            content=response.model_dump(mode="json"),
        )
    return response


@router.get("/health", response_model=HealthResponse)
async def health_check(
    pipeline: ForecastPipeline = Depends(get_pipeline),
) -> HealthResponse:
    """
    Health check endpoint that returns service status.
    """
    services = circuit_breaker_states()
    degraded = any(state != "closed" for state in services.values())

    return HealthResponse(
        status="degraded" if degraded else "healthy",
        version=settings.app_version,
        timestamp=datetime.now(UTC).isoformat(),
        pipeline_state=pipeline.state,
        services=services,
    )
