from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar, Generic
import logging

logger = logging.getLogger(__name__)

# Type variables for generics
K = TypeVar('K')  # Generic type for cache keys
V = TypeVar('V')  # Generic type for cache values


class CacheStrategy(Generic[K, V], ABC):
    """
    Abstract base interface for caching strategies.

    This interface defines the standard contract for components that absorb
    repeated identical requests to external providers within a TTL window.

    Type Parameters:
        K: The type of keys used for cache entries
        V: The type of values stored in the cache
    """

    @abstractmethod
    async def get(self, key: K) -> Optional[V]:
        """
        Retrieves a cached item by key.

        Args:
            key: The key of the item to retrieve

        Returns:
            Optional[V]: The cached value if found and not expired, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: K, value: V, ttl: Optional[int] = None) -> bool:
        """
        Stores an item in the cache.

        Args:
            key: The key to store the value under
            value: The value to store
            ttl: Optional time-to-live in seconds

        Returns:
            bool: True if successfully cached, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: K) -> bool:
        """
        Removes an item from the cache.

        Args:
            key: The key of the item to remove

        Returns:
            bool: True if the key was present and removed
        """
        pass

    @abstractmethod
    async def exists(self, key: K) -> bool:
        """
        Checks if a non-expired key exists in the cache.

        Args:
            key: The key to check

        Returns:
            bool: True if the key exists, False otherwise
        """
        pass

    @abstractmethod
    async def flush(self, prefix: Optional[str] = None) -> int:
        """
        Clears the cache or every key starting with a prefix.

        Args:
            prefix: Optional key prefix. If None, clears entire cache.

        Returns:
            int: Number of keys removed
        """
        pass

    async def get_or_set(
        self,
        key: K,
        value_func: Callable[[], Awaitable[V]],
        ttl: Optional[int] = None
    ) -> V:
        """
        Retrieves an item from cache or sets it using the provided function.

        Args:
            key: The key to look up or store under
            value_func: Coroutine function producing the value on a miss
            ttl: Optional time-to-live in seconds

        Returns:
            V: The value from cache or newly generated
        """
        value = await self.get(key)
        if value is None:
            value = await value_func()
            await self.set(key, value, ttl)
        return value

    @abstractmethod
    async def get_stats(self) -> Dict[str, Any]:
        """
        Returns statistics about the cache.

        Returns:
            Dict[str, Any]: Statistics including hits, misses and size
        """
        pass
