import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from aggregation.adapters.interfaces.external_api import ExternalSourceAdapter
from aggregation.core.logging import get_logger
from aggregation.domain.models.envelope import AggregatedResponse, ApiResponse, ResponseStatus
from aggregation.domain.models.sources import CountryData, CountryInfo

logger = get_logger(__name__)

COUNTRY_NAME_EMPTY = "Country name cannot be empty"
COUNTRY_NOT_FOUND = "Country not found"

DEFAULT_PAGE_SIZE = 10
DEFAULT_FROM_DATE_OFFSET_DAYS = 5


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AggregationService:
    """
    Combines country, weather and news lookups into one response.

    The country lookup runs first because the weather lookup needs its
    capital; weather and news then run concurrently.
    """

    def __init__(
        self,
        country: ExternalSourceAdapter,
        weather: ExternalSourceAdapter,
        news: ExternalSourceAdapter,
        clock: Callable[[], datetime] = utc_now,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        from_date_offset_days: int = DEFAULT_FROM_DATE_OFFSET_DAYS,
        date_pattern: str = "%Y-%m-%d"
    ):
        self.country = country
        self.weather = weather
        self.news = news
        self.clock = clock
        self.default_page_size = default_page_size
        self.from_date_offset_days = from_date_offset_days
        self.date_pattern = date_pattern

    async def aggregate(
        self,
        country_name: Optional[str],
        news_page_size: Optional[int] = None,
        from_date: Optional[str] = None
    ) -> AggregatedResponse:
        """
        Aggregate country, weather and news data for ``country_name``.

        Args:
            country_name: Name of the country, trimmed before use
            news_page_size: Number of articles, values <= 0 use the default
            from_date: Oldest article date, blank means a few days ago

        Returns:
            AggregatedResponse: Results in the order country, weather, news
        """
        name = (country_name or "").strip()
        if not name:
            logger.warning("Aggregation requested with an empty country name")
            return AggregatedResponse.rejected(ResponseStatus.BAD_REQUEST, COUNTRY_NAME_EMPTY)

        page_size = news_page_size if news_page_size and news_page_size > 0 else self.default_page_size
        if not from_date or not from_date.strip():
            from_date = self.default_from_date()

        logger.info(
            f"Aggregating data for country '{name}' "
            f"(page_size={page_size}, from_date={from_date})"
        )

        country_result = await self.country.fetch(name)
        if country_result.data is None:
            logger.info(f"Country '{name}' could not be resolved, skipping weather and news")
            return AggregatedResponse.rejected(ResponseStatus.NOT_FOUND, COUNTRY_NOT_FOUND)

        capital = extract_capital(country_result)
        weather_result, news_results = await asyncio.gather(
            self.weather.fetch(capital),
            self.news.fetch(name, from_date=from_date, page_size=page_size),
        )

        results: List[ApiResponse] = [country_result, weather_result, *news_results]
        response = AggregatedResponse.from_results(results)
        logger.debug(f"Aggregation for '{name}' finished with status {response.status}")
        return response

    def default_from_date(self) -> str:
        day = self.clock() - timedelta(days=self.from_date_offset_days)
        return day.strftime(self.date_pattern)


def extract_capital(result: ApiResponse) -> Optional[str]:
    """Capital city carried by a country result, or None."""
    data: Optional[CountryData] = result.data
    if isinstance(data, CountryInfo):
        return data.capital_city
    if isinstance(data, str):
        return data
    return None
