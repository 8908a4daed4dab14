"""Application errors and their JSON rendering."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from demo_service.observability.context import TRACE_STATE_KEY

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base error surfaced to clients as a JSON body with ``status_code``."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidParameterError(ServiceError):
    """A request parameter failed validation (400 Bad Request)."""

    status_code = 400


def error_body(request: Request, message: str) -> dict[str, Any]:
    trace = getattr(request.state, TRACE_STATE_KEY, None)
    trace_id: Optional[str] = trace.trace_id if trace is not None else None
    return {"error": message, "trace_id": trace_id}


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(error_body(request, exc.message), status_code=exc.status_code)


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        error_body(request, str(exc.detail)),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.debug("Rejected request with invalid parameters: %s", errors)
    return JSONResponse(error_body(request, message), status_code=400)


def register_error_handlers(app: FastAPI) -> None:
    """Render application and framework errors as ``{"error", "trace_id"}``."""

    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
