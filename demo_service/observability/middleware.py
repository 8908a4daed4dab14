"""ASGI middleware for request tracing, metrics and access logging."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

import structlog
from starlette.datastructures import MutableHeaders
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from demo_service.config.settings import Settings
from demo_service.observability.context import TRACE_STATE_KEY, RequestObservation
from demo_service.observability.logging import ACCESS_LOGGER, bind_trace_id, reset_trace_id
from demo_service.observability.metrics import HttpMetrics

logger = logging.getLogger(__name__)

ACCESS_MESSAGE = "Request completed"


def _matched_route(scope: Scope) -> Optional[str]:
    return getattr(scope.get("route"), "path", None)


class RequestContextMiddleware:
    """Attach trace identifiers, record metrics and emit one access log per request."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        settings: Settings,
        metrics: HttpMetrics,
        excluded_paths: Optional[Iterable[str]] = None,
    ) -> None:
        self.app = app
        self._header = settings.trace_id_header
        self._metrics = metrics
        if excluded_paths is None:
            excluded_paths = settings.metrics_excluded_paths
        self._excluded_paths = frozenset(excluded_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        observation = self.on_request_start(scope)
        token = bind_trace_id(observation.trace_id)
        status_code = 500
        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code, response_started

            if message["type"] == "http.response.start":
                response_started = True
                status_code = int(message["status"])
                headers = MutableHeaders(scope=message)
                headers[self._header] = observation.trace_id

            await send(message)

            if message["type"] == "http.response.body" and not message.get("more_body", False):
                self.on_response_finish(observation, scope, status_code)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            if response_started:
                self.on_response_finish(observation, scope, status_code)
                raise
            logger.exception("Unhandled exception during request %s %s", observation.method, observation.path)
            response = JSONResponse(
                {"error": "Internal Server Error", "trace_id": observation.trace_id},
                status_code=500,
            )
            await response(scope, receive, send_wrapper)
        finally:
            reset_trace_id(token)

    def on_request_start(self, scope: Scope) -> RequestObservation:
        """Create the observation and expose its trace context to handlers."""

        observation = RequestObservation.start(
            method=scope["method"],
            path=scope["path"],
            query=scope.get("query_string", b"").decode("latin-1"),
        )
        scope.setdefault("state", {})[TRACE_STATE_KEY] = observation.trace
        return observation

    def on_response_finish(self, observation: RequestObservation, scope: Scope, status_code: int) -> None:
        """Finalize ``observation`` once the response has been fully sent."""

        if observation.completed:
            return
        observation.complete(route=_matched_route(scope), status_code=status_code)

        # Metrics first so a logging failure cannot lose the sample.
        if observation.path not in self._excluded_paths:
            try:
                self._metrics.record_http_request(
                    observation.method,
                    observation.route,
                    status_code,
                    observation.duration,
                )
            except Exception:
                logger.exception("Failed to record metrics for request %s", observation.trace_id)

        try:
            _emit_access_log(observation)
        except Exception:
            logger.exception("Failed to emit access log for request %s", observation.trace_id)


def _emit_access_log(observation: RequestObservation) -> None:
    access_logger = structlog.get_logger(ACCESS_LOGGER)
    emit: Callable[..., Any] = access_logger.error if observation.level == "error" else access_logger.info
    emit(
        ACCESS_MESSAGE,
        trace_id=observation.trace_id,
        method=observation.method,
        path=observation.full_path,
        status=observation.status_code,
        duration=round(observation.duration, 6),
    )
