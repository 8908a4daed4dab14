"""Prometheus metrics utilities."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

logger = logging.getLogger(__name__)

HTTP_LABELS = ("method", "route", "status_code")


class HttpMetrics:
    """HTTP request metrics bound to a single collector registry.

    One instance is created per application and shared by the request
    middleware and the scrape endpoint.
    """

    def __init__(
        self,
        registry: Optional[CollectorRegistry] = None,
        *,
        duration_buckets: Optional[Sequence[float]] = None,
        process_collectors: bool = False,
    ) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        if process_collectors:
            ProcessCollector(registry=self.registry)
            PlatformCollector(registry=self.registry)
            GCCollector(registry=self.registry)

        histogram_kwargs = {}
        if duration_buckets:
            histogram_kwargs["buckets"] = tuple(duration_buckets)

        self.request_total = Counter(
            "http_request_total",
            "Total number of processed HTTP requests",
            labelnames=HTTP_LABELS,
            registry=self.registry,
        )
        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            labelnames=HTTP_LABELS,
            registry=self.registry,
            **histogram_kwargs,
        )
        self.request_errors = Counter(
            "http_request_errors_total",
            "Total number of HTTP requests answered with a server error",
            labelnames=HTTP_LABELS,
            registry=self.registry,
        )

    def record_http_request(self, method: str, route: str, status_code: int, duration_seconds: float) -> None:
        """Record metrics for a completed HTTP request."""

        labels = {
            "method": method,
            "route": route,
            "status_code": str(status_code),
        }
        self.request_total.labels(**labels).inc()
        self.request_duration.labels(**labels).observe(duration_seconds)
        if status_code >= 500:
            self.request_errors.labels(**labels).inc()

    def render(self) -> bytes:
        """Return the registry in the Prometheus text exposition format."""

        return generate_latest(self.registry)


def register_metrics_endpoint(app: FastAPI, metrics: HttpMetrics, path: str = "/metrics") -> None:
    """Expose a Prometheus scrape endpoint for ``metrics`` on ``path``."""

    @app.get(path, include_in_schema=False)
    async def metrics_endpoint() -> Response:
        return Response(metrics.render(), media_type=CONTENT_TYPE_LATEST)

    logger.info("Registered %s endpoint for Prometheus scraping", path)
