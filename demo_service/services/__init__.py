"""Service layer exports."""

from .fibonacci import fibonacci_iterative, fibonacci_recursive

__all__ = ["fibonacci_iterative", "fibonacci_recursive"]
