"""Tests for the aggregation workflow using adapter doubles."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from aggregation.domain.models.envelope import ApiResponse
from aggregation.domain.models.sources import Article, CountryInfo, NewsInfo, WeatherInfo
from aggregation.services.aggregation_service import AggregationService, extract_capital


def adapter(result):
    double = MagicMock()
    double.fetch = AsyncMock(return_value=result)
    return double


@pytest.fixture
def country():
    return adapter(ApiResponse.success(CountryInfo(name="Greece", capital_city="Athens")))


@pytest.fixture
def weather():
    return adapter(ApiResponse.success(WeatherInfo(temperature=22.3, weather="Sunny"), status="OK"))


@pytest.fixture
def news():
    return adapter([ApiResponse.success(NewsInfo(articles=[Article("Headline1"), Article("Headline2")]))])


@pytest.fixture
def service(country, weather, news):
    return AggregationService(
        country, weather, news,
        clock=lambda: datetime(2025, 7, 10, 23, 30, tzinfo=timezone.utc),
    )


@pytest.mark.asyncio
async def test_all_sources_succeed(service, country, weather, news):
    response = await service.aggregate("Greece", 5, "2025-07-01")

    assert response.status == "Success"
    assert response.message == "All data aggregated successfully."
    assert len(response.results) == 3
    assert response.results[0].data.capital_city == "Athens"
    assert response.results[1].data.temperature == 22.3
    assert [a.title for a in response.results[2].data.articles] == ["Headline1", "Headline2"]

    country.fetch.assert_awaited_once_with("Greece")
    weather.fetch.assert_awaited_once_with("Athens")
    news.fetch.assert_awaited_once_with("Greece", from_date="2025-07-01", page_size=5)


@pytest.mark.asyncio
@pytest.mark.parametrize("name", [None, "", "   "])
async def test_blank_country_is_bad_request(service, country, weather, news, name):
    response = await service.aggregate(name, 5, "2025-07-01")

    assert response.status == "BadRequest"
    assert response.message == "An error occurred while processing your request. See internal messages for details."
    assert len(response.results) == 1
    assert response.results[0].message == "Country name cannot be empty"
    assert response.results[0].status == "BadRequest"
    country.fetch.assert_not_awaited()
    weather.fetch.assert_not_awaited()
    news.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_country_stops_before_fan_out(weather, news):
    country = adapter(ApiResponse.error("Country not found in the external API."))
    service = AggregationService(country, weather, news)

    response = await service.aggregate("Atlantis", 5, "2025-07-01")

    assert response.status == "NotFound"
    assert len(response.results) == 1
    assert response.results[0].message == "Country not found"
    assert response.results[0].status == "NotFound"
    weather.fetch.assert_not_awaited()
    news.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_weather_failure_is_partial(country, news):
    weather = adapter(ApiResponse.error("Weather Not found."))
    service = AggregationService(country, weather, news)

    response = await service.aggregate("Greece", 5, "2025-07-01")

    assert response.status == "Error"
    assert response.message == "Some errors occurred. Check internal messages for details."
    assert [r.status for r in response.results] == ["Success", "Error", "Success"]


@pytest.mark.asyncio
async def test_news_failure_is_partial(country, weather):
    news = adapter([ApiResponse.error("No news articles found.")])
    service = AggregationService(country, weather, news)

    response = await service.aggregate("Greece", 5, "2025-07-01")

    assert response.status == "Error"
    assert [r.status for r in response.results] == ["Success", "OK", "Error"]


@pytest.mark.asyncio
async def test_non_generic_error_labels_do_not_change_verdict(country, news):
    weather = adapter(ApiResponse.error("Weather Not found.", status="NotFound"))
    service = AggregationService(country, weather, news)

    response = await service.aggregate("Greece", 5, "2025-07-01")

    assert response.status == "Success"
    assert response.results[1].status == "NotFound"


@pytest.mark.asyncio
async def test_defaults_and_trimming(service, country, news):
    await service.aggregate("  Greece  ", 0, "  ")

    country.fetch.assert_awaited_once_with("Greece")
    news.fetch.assert_awaited_once_with("Greece", from_date="2025-07-05", page_size=10)


@pytest.mark.asyncio
async def test_negative_and_missing_page_size_use_default(service, news):
    await service.aggregate("Greece", -3, "2025-07-01")
    await service.aggregate("Greece", None, "2025-07-01")

    assert [c.kwargs["page_size"] for c in news.fetch.await_args_list] == [10, 10]


@pytest.mark.asyncio
async def test_string_country_data_is_used_as_capital(weather, news):
    country = adapter(ApiResponse.success("Athens"))
    service = AggregationService(country, weather, news)

    await service.aggregate("Greece", 5, "2025-07-01")

    weather.fetch.assert_awaited_once_with("Athens")


@pytest.mark.asyncio
async def test_result_order_ignores_completion_order(country):
    async def slow_weather(city):
        await asyncio.sleep(0.01)
        return ApiResponse.success(WeatherInfo(temperature=1.0, weather="Rain"), status="OK")

    weather = MagicMock()
    weather.fetch = slow_weather
    news = adapter([ApiResponse.success(NewsInfo())])
    service = AggregationService(country, weather, news)

    response = await service.aggregate("Greece", 5, "2025-07-01")

    assert isinstance(response.results[1].data, WeatherInfo)
    assert isinstance(response.results[2].data, NewsInfo)


def test_extract_capital_variants():
    assert extract_capital(ApiResponse.success(CountryInfo("Greece", "Athens"))) == "Athens"
    assert extract_capital(ApiResponse.success("Athens")) == "Athens"
    assert extract_capital(ApiResponse.success(42)) is None


@pytest.mark.asyncio
async def test_cancelling_aggregate_cancels_both_branches(country):
    started = {"weather": asyncio.Event(), "news": asyncio.Event()}
    cancelled = []

    def blocking(source):
        async def fetch(*args, **kwargs):
            started[source].set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.append(source)
                raise
        return fetch

    weather = MagicMock()
    weather.fetch = blocking("weather")
    news = MagicMock()
    news.fetch = blocking("news")
    service = AggregationService(country, weather, news)

    task = asyncio.create_task(service.aggregate("Greece", 5, "2025-07-01"))
    await started["weather"].wait()
    await started["news"].wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert sorted(cancelled) == ["news", "weather"]
