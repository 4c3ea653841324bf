"""HTTP transport used to reach the external providers."""

from aggregation.infrastructure.http.circuit_breaker import CircuitBreaker
from aggregation.infrastructure.http.resilient_client import ResilientHttpClient

__all__ = ["CircuitBreaker", "ResilientHttpClient"]
