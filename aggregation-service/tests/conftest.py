"""Shared fixtures: settings, cache and a fake provider behind httpx.MockTransport."""

import json
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from aggregation.adapters.implementations.country import CountryInfoAdapter
from aggregation.adapters.implementations.news import NewsAdapter
from aggregation.adapters.implementations.weather import WeatherAdapter
from aggregation.adapters.interfaces.connector import RequestConfig
from aggregation.core.config import Settings
from aggregation.infrastructure.cache.memory_cache import MemoryCache
from aggregation.infrastructure.http.resilient_client import ResilientHttpClient

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"

COUNTRIES = [
    {"name": {"common": "Greece", "official": "Hellenic Republic"}, "capital": ["Athens"], "cca2": "GR"},
    {"name": {"common": "South Africa", "official": "Republic of South Africa"},
     "capital": ["Pretoria", "Bloemfontein", "Cape Town"], "cca2": "ZA"},
    {"name": {"common": "Antarctica", "official": "Antarctica"}, "capital": [], "cca2": "AQ"},
    {"name": {"common": "Guinea", "official": "Republic of Guinea"}, "capital": ["Conakry"], "cca2": "GN"},
    {"name": {"common": "Equatorial Guinea", "official": "Republic of Equatorial Guinea"},
     "capital": ["Malabo"], "cca2": "GQ"},
]

WEATHER = {
    "name": "Athens",
    "weather": [{"id": 800, "main": "Clear", "description": "Sunny", "icon": "01d"}],
    "main": {"temp": 22.3, "humidity": 40},
    "cod": 200,
}

NEWS = {
    "status": "ok",
    "totalResults": 3,
    "articles": [
        {"title": "Headline1", "publishedAt": "2025-07-02T10:00:00Z"},
        {"title": "", "publishedAt": "2025-07-02T09:00:00Z"},
        {"title": "Headline2", "publishedAt": "2025-07-01T08:00:00Z"},
    ],
}

Reply = Union[Tuple[int, Any], Callable[[httpx.Request], httpx.Response]]


class FakeProvider:
    """Serves canned replies per path suffix and records every request."""

    def __init__(self, routes: Dict[str, Reply]):
        self.routes = routes
        self.requests: List[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for suffix, reply in self.routes.items():
            if request.url.path.endswith(suffix):
                if callable(reply):
                    return reply(request)
                status_code, body = reply
                if isinstance(body, str):
                    return httpx.Response(status_code, text=body)
                return httpx.Response(status_code, content=json.dumps(body))
        return httpx.Response(404, json={"message": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


async def no_sleep(_seconds: float) -> None:
    return None


def make_client(name: str, provider: FakeProvider, max_retries: int = 1) -> ResilientHttpClient:
    return ResilientHttpClient(
        name=name,
        base_url=f"https://{name}.test/",
        config=RequestConfig(max_retries=max_retries, failure_threshold=100),
        transport=provider.transport,
        sleep=no_sleep,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        JWT_SECRET_KEY=TEST_SECRET,
        JWT_USERNAME="admin",
        JWT_PASSWORD="secret",
        OPENWEATHER_API_KEY="weather-key",
        NEWS_API_KEY="news-key",
        ENABLE_STRUCTURED_LOGGING=False,
    )


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache(default_ttl=3600)


@pytest.fixture
def country_provider() -> FakeProvider:
    return FakeProvider({"/all": (200, COUNTRIES)})


@pytest.fixture
def weather_provider() -> FakeProvider:
    return FakeProvider({"/weather": (200, WEATHER)})


@pytest.fixture
def news_provider() -> FakeProvider:
    return FakeProvider({"/everything": (200, NEWS)})


@pytest.fixture
def country_adapter(country_provider, cache) -> CountryInfoAdapter:
    return CountryInfoAdapter(make_client("country", country_provider), cache, 3600)


@pytest.fixture
def weather_adapter(weather_provider, cache) -> WeatherAdapter:
    return WeatherAdapter(make_client("weather", weather_provider), cache, 3600, api_key="weather-key")


@pytest.fixture
def news_adapter(news_provider, cache) -> NewsAdapter:
    return NewsAdapter(make_client("news", news_provider), cache, 3600, api_key="news-key")
