import logging
from typing import Any, Dict, List, Optional

import httpx

from aggregation.adapters.implementations.country import CountryInfoAdapter
from aggregation.adapters.implementations.news import NewsAdapter
from aggregation.adapters.implementations.weather import WeatherAdapter
from aggregation.adapters.interfaces.cache import CacheStrategy
from aggregation.adapters.interfaces.connector import APIConnector, RequestConfig
from aggregation.adapters.interfaces.external_api import ExternalSourceAdapter
from aggregation.adapters.registry import AdaptorRegistry
from aggregation.core.config import Settings
from aggregation.core.exceptions import AdaptorNotFoundError
from aggregation.infrastructure.http.resilient_client import ResilientHttpClient

logger = logging.getLogger(__name__)

COUNTRY = "country"
WEATHER = "weather"
NEWS = "news"


def default_registry() -> AdaptorRegistry:
    """Registry holding the three built-in sources."""
    registry = AdaptorRegistry()
    registry.register(COUNTRY, CountryInfoAdapter)
    registry.register(WEATHER, WeatherAdapter)
    registry.register(NEWS, NewsAdapter)
    return registry


class AdaptorFactory:
    """
    Factory for creating source adaptor instances.

    Every adaptor gets its own resilient HTTP client pointed at the
    provider's base URL, and all of them share one cache.
    """

    def __init__(
        self,
        settings: Settings,
        cache: CacheStrategy,
        registry: Optional[AdaptorRegistry] = None,
        transports: Optional[Dict[str, httpx.AsyncBaseTransport]] = None
    ):
        """
        Initialize the adaptor factory.

        Args:
            settings: Application settings
            cache: Shared TTL cache handed to every adaptor
            registry: Optional registry of available adaptors
            transports: Optional httpx transports per source, used in tests
        """
        self.settings = settings
        self.cache = cache
        self.registry = registry or default_registry()
        self.transports = transports or {}
        self._connectors: List[APIConnector] = []
        logger.info("Initialized AdaptorFactory")

    def create_adaptor(self, source: str) -> ExternalSourceAdapter:
        """
        Create the adaptor registered for ``source``.

        Raises:
            AdaptorNotFoundError: If the source is not registered
        """
        if not self.registry.is_registered(source):
            raise AdaptorNotFoundError(source, available=self.registry.list())

        adaptor_class = self.registry.get(source)

        connector = self._build_connector(source)
        adaptor = adaptor_class(
            connector,
            self.cache,
            self.settings.cache_ttl_seconds,
            **self._adaptor_options(source),
        )
        logger.info(f"Created {source} adaptor")
        return adaptor

    def _build_connector(self, source: str) -> APIConnector:
        base_urls = {
            COUNTRY: self.settings.COUNTRY_BASE_URL,
            WEATHER: self.settings.WEATHER_BASE_URL,
            NEWS: self.settings.NEWS_BASE_URL,
        }
        config = RequestConfig(
            max_retries=self.settings.MAX_RETRIES,
            timeout=self.settings.DEFAULT_TIMEOUT,
            backoff_factor=self.settings.RETRY_BACKOFF_FACTOR,
            failure_threshold=self.settings.CIRCUIT_BREAKER_FAILURE_THRESHOLD,
            reset_timeout=self.settings.CIRCUIT_BREAKER_RESET_SECONDS,
        )
        connector = ResilientHttpClient(
            name=source,
            base_url=base_urls.get(source, ""),
            config=config,
            headers={"User-Agent": self.settings.USER_AGENT, "Accept": "application/json"},
            transport=self.transports.get(source),
        )
        self._connectors.append(connector)
        return connector

    def _adaptor_options(self, source: str) -> Dict[str, Any]:
        if source == WEATHER:
            return {"api_key": self.settings.OPENWEATHER_API_KEY}
        if source == NEWS:
            return {
                "api_key": self.settings.NEWS_API_KEY,
                "date_format": self.settings.NEWS_DATE_FORMAT,
                "date_pattern": self.settings.news_date_pattern,
            }
        return {}

    async def close(self) -> None:
        """Close every HTTP client created by this factory."""
        for connector in self._connectors:
            await connector.close()
        self._connectors.clear()
