"""Schema exports."""

from .demo import ErrorResponse, FibonacciResponse, GreetingResponse, HealthResponse

__all__ = [
    "ErrorResponse",
    "FibonacciResponse",
    "GreetingResponse",
    "HealthResponse",
]
