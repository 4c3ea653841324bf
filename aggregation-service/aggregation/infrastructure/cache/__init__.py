"""Caching implementations for the Aggregation Service."""

from aggregation.infrastructure.cache.memory_cache import MemoryCache

__all__ = ["MemoryCache"]
