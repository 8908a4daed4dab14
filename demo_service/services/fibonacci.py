"""Fibonacci calculators backing the demo endpoints."""

from __future__ import annotations


def fibonacci_recursive(n: int) -> int:
    """Naive doubly recursive Fibonacci; exponential in ``n``."""

    if n < 0:
        raise ValueError("n must be a non-negative integer")
    if n < 2:
        return n
    return fibonacci_recursive(n - 1) + fibonacci_recursive(n - 2)


def fibonacci_iterative(n: int) -> int:
    """Bottom-up Fibonacci in linear time and constant space."""

    if n < 0:
        raise ValueError("n must be a non-negative integer")
    previous, current = 0, 1
    for _ in range(n):
        previous, current = current, previous + current
    return previous
