"""Pydantic models for the demo endpoints."""

from typing import Literal

from pydantic import BaseModel


class GreetingResponse(BaseModel):
    message: str
    trace_id: str


class ErrorResponse(BaseModel):
    error: str
    trace_id: str | None = None


class FibonacciResponse(BaseModel):
    n: int
    result: int
    algorithm: Literal["recursive", "iterative"]
    trace_id: str


class HealthResponse(BaseModel):
    status: str
