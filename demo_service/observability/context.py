"""Per-request observation state shared between the middleware and handlers."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, Request

TRACE_STATE_KEY = "trace"


def new_trace_id() -> str:
    """Return a fresh random (version 4) UUID string."""

    return str(uuid.uuid4())


@dataclass(frozen=True)
class TraceContext:
    """Read-only view of the request trace handed to route handlers."""

    trace_id: str
    start_time: float
    started_at: datetime


@dataclass
class RequestObservation:
    """Middleware-owned record of a single request, completed exactly once."""

    trace: TraceContext
    method: str
    path: str
    query: str = ""
    route: Optional[str] = field(default=None, init=False)
    status_code: Optional[int] = field(default=None, init=False)
    duration: Optional[float] = field(default=None, init=False)

    @classmethod
    def start(cls, method: str, path: str, query: str = "") -> "RequestObservation":
        trace = TraceContext(
            trace_id=new_trace_id(),
            start_time=time.perf_counter(),
            started_at=datetime.now(timezone.utc),
        )
        return cls(trace=trace, method=method, path=path, query=query)

    @property
    def trace_id(self) -> str:
        return self.trace.trace_id

    @property
    def full_path(self) -> str:
        """The original request target, query string included."""

        if self.query:
            return f"{self.path}?{self.query}"
        return self.path

    @property
    def completed(self) -> bool:
        return self.status_code is not None

    @property
    def level(self) -> str:
        if self.status_code is not None and self.status_code >= 400:
            return "error"
        return "info"

    def complete(self, *, route: Optional[str], status_code: int, now: Optional[float] = None) -> None:
        """Fill in the completion fields.

        ``route`` falls back to the raw request path when the router matched
        nothing. Raises ``RuntimeError`` if the observation was already
        completed.
        """

        if self.completed:
            raise RuntimeError(f"Request {self.trace_id} already completed")
        finished = time.perf_counter() if now is None else now
        self.route = route or self.path
        self.status_code = status_code
        self.duration = max(finished - self.trace.start_time, 0.0)


def get_trace_context(request: Request) -> TraceContext:
    """FastAPI dependency returning the trace context bound by the middleware."""

    trace: TraceContext | None = getattr(request.state, TRACE_STATE_KEY, None)
    if trace is None:
        raise HTTPException(status_code=500, detail="Request tracing is not configured")
    return trace
