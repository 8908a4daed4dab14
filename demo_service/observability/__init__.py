"""Observability utilities for logging, metrics, and tracing."""

from .context import RequestObservation, TraceContext, get_trace_context
from .logging import bind_trace_id, configure_logging, current_trace_id, reset_trace_id
from .metrics import HttpMetrics, register_metrics_endpoint
from .middleware import RequestContextMiddleware

__all__ = [
    "HttpMetrics",
    "RequestContextMiddleware",
    "RequestObservation",
    "TraceContext",
    "bind_trace_id",
    "configure_logging",
    "current_trace_id",
    "get_trace_context",
    "register_metrics_endpoint",
    "reset_trace_id",
]
