"""Observability demo service: greeting, error simulation and Fibonacci endpoints."""
