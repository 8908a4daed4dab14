"""Greeting, error simulation and Fibonacci endpoints."""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from demo_service.api.errors import InvalidParameterError
from demo_service.config.settings import Settings, get_settings
from demo_service.observability.context import TraceContext, get_trace_context
from demo_service.schemas.demo import ErrorResponse, FibonacciResponse, GreetingResponse
from demo_service.services.fibonacci import fibonacci_iterative, fibonacci_recursive

logger = logging.getLogger(__name__)

GREETING = "Hello World 👋"

router = APIRouter(tags=["demo"])


def _get_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def _parse_index(raw: str, *, limit: int) -> int:
    negative = raw.startswith("-")
    digits = raw[1:] if negative else raw
    # Plain ASCII digits only: int() would also take "+5", "1_0" and padded input.
    if not (digits.isascii() and digits.isdigit()):
        raise InvalidParameterError(f"n must be an integer, got {raw!r}")
    if negative:
        raise InvalidParameterError("n must be a non-negative integer")
    significant = digits.lstrip("0") or "0"
    if len(significant) > len(str(limit)) or int(significant) > limit:
        raise InvalidParameterError(f"n must not exceed {limit}")
    return int(significant)


@router.get("/", response_model=GreetingResponse)
async def greeting(trace: TraceContext = Depends(get_trace_context)) -> GreetingResponse:
    return GreetingResponse(message=GREETING, trace_id=trace.trace_id)


@router.get("/hello", response_model=GreetingResponse)
async def hello(trace: TraceContext = Depends(get_trace_context)) -> GreetingResponse:
    return GreetingResponse(message=GREETING, trace_id=trace.trace_id)


@router.get("/error", response_model=ErrorResponse, status_code=500)
async def simulate_error(trace: TraceContext = Depends(get_trace_context)) -> JSONResponse:
    """Always answer with a 500 so error paths can be observed end to end."""

    logger.warning("Simulated server error requested")
    body = ErrorResponse(error="Simulated server error", trace_id=trace.trace_id)
    return JSONResponse(body.model_dump(), status_code=500)


def _fibonacci(
    raw: str,
    *,
    limit: int,
    algorithm: str,
    calculate: Callable[[int], int],
    trace: TraceContext,
) -> FibonacciResponse:
    n = _parse_index(raw, limit=limit)
    result = calculate(n)
    logger.debug("Computed %s fibonacci(%d)", algorithm, n)
    return FibonacciResponse(n=n, result=result, algorithm=algorithm, trace_id=trace.trace_id)


@router.get("/fibonacci/recursive/{n}", response_model=FibonacciResponse, responses={400: {"model": ErrorResponse}})
def fibonacci_recursive_endpoint(
    n: str,
    trace: TraceContext = Depends(get_trace_context),
    settings: Settings = Depends(_get_settings),
) -> FibonacciResponse:
    """Naive recursive calculation, bounded by ``FIBONACCI_RECURSIVE_MAX_N``."""

    return _fibonacci(
        n,
        limit=settings.fibonacci_recursive_max_n,
        algorithm="recursive",
        calculate=fibonacci_recursive,
        trace=trace,
    )


@router.get("/fibonacci/iterative/{n}", response_model=FibonacciResponse, responses={400: {"model": ErrorResponse}})
async def fibonacci_iterative_endpoint(
    n: str,
    trace: TraceContext = Depends(get_trace_context),
    settings: Settings = Depends(_get_settings),
) -> FibonacciResponse:
    return _fibonacci(
        n,
        limit=settings.fibonacci_iterative_max_n,
        algorithm="iterative",
        calculate=fibonacci_iterative,
        trace=trace,
    )
