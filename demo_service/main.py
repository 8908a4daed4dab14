"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from demo_service.api.errors import register_error_handlers
from demo_service.api.router import api_router
from demo_service.config.settings import Settings, get_settings
from demo_service.observability import (
    HttpMetrics,
    RequestContextMiddleware,
    configure_logging,
    register_metrics_endpoint,
)
from demo_service.schemas.demo import HealthResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Application startup, serving on %s:%s", settings.host, settings.port)
    try:
        yield
    finally:
        logger.info("Application shutdown...")


def build_metrics(settings: Settings) -> HttpMetrics:
    return HttpMetrics(
        duration_buckets=settings.metrics_duration_buckets,
        process_collectors=settings.metrics_process_collectors,
    )


def create_app(settings: Settings | None = None, *, metrics: HttpMetrics | None = None) -> FastAPI:
    settings = settings or get_settings()
    metrics = metrics or build_metrics(settings)

    configure_logging(settings)

    application = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.metrics = metrics

    application.add_middleware(RequestContextMiddleware, settings=settings, metrics=metrics)
    register_error_handlers(application)
    application.include_router(api_router)
    register_metrics_endpoint(application, metrics, path=settings.metrics_path)

    @application.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        return HealthResponse(status="ok")

    return application


app = create_app()
