import asyncio
import copy
import time
import threading
from typing import Any, Awaitable, Callable, Dict, Optional

from aggregation.core.exceptions import CacheError
from aggregation.core.logging import get_logger
from aggregation.adapters.interfaces.cache import CacheStrategy

logger = get_logger(__name__)


class CacheItem:
    """Class representing a cached item with expiration."""

    def __init__(self, value: Any, expires_at: Optional[float] = None):
        """
        Initialize a cache item.

        Args:
            value: Cached value
            expires_at: Expiration timestamp
        """
        self.value = value
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        """
        Check if the item has expired.

        Args:
            now: Current timestamp

        Returns:
            True if expired
        """
        if self.expires_at is None:
            return False
        return now > self.expires_at


class MemoryCache(CacheStrategy):
    """In-memory implementation of the CacheStrategy interface."""

    def __init__(
        self,
        default_ttl: int = 3600,
        cleanup_interval: Optional[int] = None,
        time_fn: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the in-memory cache.

        Args:
            default_ttl: Default TTL in seconds
            cleanup_interval: Interval for expired items cleanup in seconds,
                None disables the cleanup thread
            time_fn: Clock used for expiry checks
        """
        self.default_ttl = default_ttl
        self.cleanup_interval = cleanup_interval
        self._time = time_fn

        self._cache: Dict[str, CacheItem] = {}
        self._lock = threading.RLock()

        # Per-key locks coalescing concurrent misses in get_or_set
        self._key_locks: Dict[str, asyncio.Lock] = {}
        self._key_waiters: Dict[str, int] = {}

        self._hits = 0
        self._misses = 0

        if cleanup_interval:
            self._start_cleanup_thread()

        logger.info("In-memory cache initialized")

    def _start_cleanup_thread(self):
        """Start a background thread to clean up expired items."""
        def cleanup_task():
            while True:
                time.sleep(self.cleanup_interval)
                try:
                    self._cleanup_expired()
                except Exception as e:
                    logger.error(f"Error in cache cleanup thread: {str(e)}")

        cleanup_thread = threading.Thread(target=cleanup_task, daemon=True)
        cleanup_thread.start()
        logger.debug(f"Started cache cleanup thread with interval {self.cleanup_interval}s")

    def _cleanup_expired(self) -> int:
        """Clean up expired cache items."""
        with self._lock:
            now = self._time()
            keys_to_delete = [k for k, item in self._cache.items() if item.is_expired(now)]

            for key in keys_to_delete:
                del self._cache[key]

            if keys_to_delete:
                logger.debug(f"Cleaned up {len(keys_to_delete)} expired cache items")
            return len(keys_to_delete)

    async def get(self, key: str) -> Any:
        """
        Get item from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found or expired
        """
        with self._lock:
            item = self._cache.get(key)

            if item is None:
                self._misses += 1
                logger.debug(f"Cache miss for key: {key}")
                return None

            if item.is_expired(self._time()):
                del self._cache[key]
                self._misses += 1
                logger.debug(f"Cache miss (expired) for key: {key}")
                return None

            # Return deep copy of value to prevent mutations
            self._hits += 1
            logger.debug(f"Cache hit for key: {key}")
            return copy.deepcopy(item.value)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Set item in cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl: TTL in seconds

        Returns:
            True if successful
        """
        effective_ttl = ttl if ttl is not None else self.default_ttl

        expires_at = None
        if effective_ttl > 0:
            expires_at = self._time() + effective_ttl

        try:
            item = CacheItem(value=copy.deepcopy(value), expires_at=expires_at)
        except Exception as e:
            raise CacheError(f"Value for key {key} cannot be cached: {str(e)}")

        with self._lock:
            self._cache[key] = item

        logger.debug(f"Set cache key {key} with TTL {effective_ttl}s")
        return True

    async def delete(self, key: str) -> bool:
        """
        Remove item from cache.

        Args:
            key: Cache key

        Returns:
            True if key was found and deleted
        """
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                logger.debug(f"Deleted cache key: {key}")
                return True

            logger.debug(f"Key not found for deletion: {key}")
            return False

    async def exists(self, key: str) -> bool:
        """
        Check if key exists in cache.

        Args:
            key: Cache key

        Returns:
            True if key exists and has not expired
        """
        with self._lock:
            item = self._cache.get(key)
            if item is None:
                return False

            if item.is_expired(self._time()):
                del self._cache[key]
                return False

            return True

    async def flush(self, prefix: Optional[str] = None) -> int:
        """
        Clear the cache, or only the keys starting with prefix.

        Args:
            prefix: Optional key prefix

        Returns:
            Number of keys cleared
        """
        with self._lock:
            if prefix:
                keys_to_delete = [k for k in self._cache if k.startswith(prefix)]
                for key in keys_to_delete:
                    del self._cache[key]
                logger.info(f"Flushed {len(keys_to_delete)} keys with prefix {prefix}")
                return len(keys_to_delete)

            count = len(self._cache)
            self._cache.clear()
            logger.info(f"Flushed all {count} keys from cache")
            return count

    async def get_or_set(
        self,
        key: str,
        value_func: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None
    ) -> Any:
        """
        Get a value, computing and storing it on a miss.

        Concurrent callers missing on the same key wait for the first
        computation instead of issuing their own.

        Args:
            key: Cache key
            value_func: Coroutine function producing the value
            ttl: TTL in seconds

        Returns:
            The cached or freshly computed value
        """
        value = await self.get(key)
        if value is not None:
            return value

        lock = self._key_locks.get(key)
        if lock is None:
            lock = self._key_locks[key] = asyncio.Lock()
        self._key_waiters[key] = self._key_waiters.get(key, 0) + 1

        try:
            async with lock:
                value = await self.get(key)
                if value is not None:
                    return value

                value = await value_func()
                await self.set(key, value, ttl)
                return copy.deepcopy(value)
        finally:
            # the last caller for a key drops its lock
            self._key_waiters[key] -= 1
            if not self._key_waiters[key]:
                del self._key_waiters[key]
                del self._key_locks[key]

    async def get_stats(self) -> Dict[str, Any]:
        """
        Returns statistics about the cache.

        Returns:
            Dict with hits, misses and current size
        """
        with self._lock:
            return {
                "hits": self._hits,
                "misses": self._misses,
                "size": len(self._cache),
            }
