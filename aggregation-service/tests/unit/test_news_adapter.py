"""Tests for the news adapter."""

import pytest

from aggregation.adapters.implementations.news import (
    NO_NEWS_FOUND,
    QUERY_NULL_ERROR,
    NewsAdapter,
)
from aggregation.domain.models.sources import Article, NewsInfo
from tests.conftest import FakeProvider, make_client


@pytest.mark.asyncio
async def test_blank_query_is_rejected(news_adapter, news_provider):
    results = await news_adapter.fetch("")

    assert len(results) == 1
    assert results[0].status == "Error"
    assert results[0].message == QUERY_NULL_ERROR
    assert news_provider.calls == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("from_date", ["01/07/2025", "2025-13-01", "yesterday"])
async def test_bad_date_is_rejected(news_adapter, news_provider, from_date):
    results = await news_adapter.fetch("Greece", from_date=from_date, page_size=5)

    assert results[0].status == "Error"
    assert results[0].message == "Please use this date format: yyyy-MM-dd"
    assert news_provider.calls == 0


@pytest.mark.asyncio
async def test_articles_are_normalized_without_blank_titles(news_adapter, news_provider):
    results = await news_adapter.fetch("Greece", from_date="2025-07-01", page_size=5)

    assert len(results) == 1
    assert results[0].status == "Success"
    assert results[0].data == NewsInfo(articles=[Article("Headline1"), Article("Headline2")])

    params = news_provider.requests[0].url.params
    assert params["q"] == "Greece"
    assert params["from"] == "2025-07-01"
    assert params["sortBy"] == "publishedAt"
    assert params["apiKey"] == "news-key"
    assert params["pageSize"] == "5"


@pytest.mark.asyncio
async def test_cache_key_includes_paging(news_adapter, news_provider, cache):
    await news_adapter.fetch("Greece", from_date="2025-07-01", page_size=5)
    await news_adapter.fetch("greece", from_date="2025-07-01", page_size=5)
    await news_adapter.fetch("Greece", from_date="2025-07-01", page_size=6)

    assert news_provider.calls == 2
    assert await cache.exists("News:greece:5:2025-07-01")
    assert await cache.exists("News:greece:6:2025-07-01")


@pytest.mark.asyncio
async def test_zero_articles_evicts_entry(cache):
    provider = FakeProvider({"/everything": (200, {"status": "ok", "totalResults": 0, "articles": []})})
    adapter = NewsAdapter(make_client("news", provider), cache, 3600, api_key="k")

    results = await adapter.fetch("Greece", from_date="2025-07-01", page_size=10)

    assert len(results) == 1
    assert results[0].message == NO_NEWS_FOUND
    assert results[0].status == "Error"
    assert not await cache.exists("News:greece:10:2025-07-01")


@pytest.mark.asyncio
async def test_custom_date_format(cache, news_provider):
    adapter = NewsAdapter(
        make_client("news", news_provider), cache, 3600,
        api_key="k", date_format="dd.MM.yyyy", date_pattern="%d.%m.%Y",
    )

    ok = await adapter.fetch("Greece", from_date="01.07.2025")
    bad = await adapter.fetch("Greece", from_date="2025-07-01")

    assert ok[0].status == "Success"
    assert bad[0].message == "Please use this date format: dd.MM.yyyy"
