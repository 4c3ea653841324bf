from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Optional, TypeVar
import logging

from aggregation.adapters.interfaces.cache import CacheStrategy
from aggregation.adapters.interfaces.connector import APIConnector
from aggregation.core.exceptions import TransportError
from aggregation.core.logging import get_logger

# Type variables for generics
T = TypeVar('T')  # Raw payload type stored in the cache
R = TypeVar('R')  # Result type handed back to callers


class ExternalSourceAdapter(Generic[T, R], ABC):
    """
    Abstract base for external source adapters.

    Every adapter follows the same pipeline: validate the input, look the raw
    payload up in the shared cache (fetching it on a miss), evict and report
    "not found" when the payload holds no usable data, otherwise normalize it
    and wrap it in an envelope. Adapters never raise to their caller.

    Type Parameters:
        T: The raw payload type read from the provider and cached
        R: The envelope (or envelopes) returned by ``fetch``
    """

    CACHE_PREFIX: str = ""

    def __init__(
        self,
        connector: APIConnector,
        cache: CacheStrategy,
        cache_ttl: int,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            connector: Transport used to reach the provider
            cache: Shared TTL cache
            cache_ttl: Lifetime of cached payloads in seconds
            logger: Optional logger, defaults to the module logger
        """
        self.connector = connector
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.logger = logger or get_logger(type(self).__module__)

    async def fetch(self, key: Optional[str], **params: Any) -> R:
        """
        Run the adapter pipeline for ``key``.

        Args:
            key: Primary lookup key (country name, city, query)
            **params: Source specific parameters

        Returns:
            R: Envelope(s) describing the outcome
        """
        try:
            return await self._fetch(key, **params)
        except Exception as e:
            self.logger.exception(f"Unexpected error in {type(self).__name__} for '{key}'")
            return self._unexpected_error(e)

    @abstractmethod
    async def _fetch(self, key: Optional[str], **params: Any) -> R:
        """Validate, load and normalize; concrete adapters implement this."""
        pass

    @abstractmethod
    def _unexpected_error(self, exc: Exception) -> R:
        """Envelope(s) returned when ``_fetch`` raised."""
        pass

    def cache_key(self, *parts: Any) -> str:
        """Build a namespaced key from normalized parts."""
        return self.CACHE_PREFIX + ":".join(str(p) for p in parts)

    async def load_payload(
        self,
        cache_key: str,
        path: str,
        params: Dict[str, Any],
        parse: Callable[[str], T],
        empty: Callable[[], T]
    ) -> T:
        """
        Return the cached payload for ``cache_key`` or fetch and cache it.

        Non-success statuses, transport failures and parse errors all yield
        ``empty()``, which is cached like any other payload.
        """

        async def _from_provider() -> T:
            self.logger.debug(f"Fetching {path} from provider for key {cache_key}")
            try:
                response = await self.connector.get(path, params=params)
            except TransportError as e:
                self.logger.error(f"Error calling provider for {cache_key}: {e.detail}")
                return empty()

            if not response.is_success:
                self.logger.warning(
                    f"Provider returned status code {response.status_code} for key {cache_key}"
                )
                return empty()

            try:
                payload = parse(response.body)
            except ValueError as e:
                self.logger.error(f"Error deserializing provider response for {cache_key}: {str(e)}")
                return empty()
            return payload if payload is not None else empty()

        return await self.cache.get_or_set(cache_key, _from_provider, self.cache_ttl)

    async def evict(self, cache_key: str) -> None:
        """Drop a negative result so the next call asks the provider again."""
        await self.cache.delete(cache_key)
