import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from forecast_service.api.v1 import routes as v1_routes
from forecast_service.config import get_settings
from forecast_service.middleware.request_tracker import RequestTrackerMiddleware
from forecast_service.utils.dependencies import build_pipeline
from forecast_service.utils.logger import setup_logger

logger = setup_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Forecast Dashboard API...")

    resources = build_pipeline(settings)
    app.state.pipeline = resources.pipeline

    # Initial load for the default city; searches may supersede it.
    app.state.initial_load_task = asyncio.create_task(
        resources.pipeline.request_forecast(settings.default_city)
    )

    yield

    logger.info("Shutting down Forecast Dashboard API...")

    app.state.initial_load_task.cancel()
    await resources.close()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

app.add_middleware(RequestTrackerMiddleware)

Instrumentator().instrument(app).expose(app, endpoint="/prometheus-metrics")

app.include_router(v1_routes.router)

if __name__ == "__main__":
    uvicorn.run(
        "forecast_service.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
