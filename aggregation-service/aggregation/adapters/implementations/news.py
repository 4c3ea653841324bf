from datetime import datetime
from typing import List, Optional

from aggregation.adapters.implementations.client_models import RestNews, parse_news
from aggregation.adapters.interfaces.external_api import ExternalSourceAdapter
from aggregation.domain.models.envelope import ApiResponse
from aggregation.domain.models.sources import Article, NewsInfo

QUERY_NULL_ERROR = "Search query must be provided."
NO_NEWS_FOUND = "No news articles found."


class NewsAdapter(ExternalSourceAdapter[RestNews, List[ApiResponse]]):
    """
    Headlines matching a query, newest first.

    Returns a list of envelopes so that "no articles" stays distinct from a
    single successful record.
    """

    CACHE_PREFIX = "News:"

    def __init__(self, *args, api_key: str, date_format: str = "yyyy-MM-dd",
                 date_pattern: str = "%Y-%m-%d", **kwargs):
        super().__init__(*args, **kwargs)
        self.api_key = api_key
        self.date_format = date_format
        self.date_pattern = date_pattern

    @property
    def date_format_error(self) -> str:
        return f"Please use this date format: {self.date_format}"

    async def _fetch(
        self,
        key: Optional[str],
        from_date: Optional[str] = None,
        page_size: int = 10,
        **params
    ) -> List[ApiResponse]:
        if not key or not key.strip():
            self.logger.warning("News lookup called with null or empty query")
            return [ApiResponse.error(QUERY_NULL_ERROR)]

        if from_date and not self.is_valid_date(from_date):
            self.logger.warning(f"Invalid date format provided: {from_date}")
            return [ApiResponse.error(self.date_format_error)]

        cache_key = self.cache_key(key.strip().lower(), page_size, from_date or "")
        query = {
            "q": key,
            "sortBy": "publishedAt",
            "apiKey": self.api_key,
            "pageSize": page_size,
        }
        if from_date:
            query["from"] = from_date

        payload = await self.load_payload(
            cache_key,
            "everything",
            query,
            parse=parse_news,
            empty=RestNews,
        )
        if not payload.articles:
            self.logger.info(f"No news found for query '{key}'")
            await self.evict(cache_key)
            return [ApiResponse.error(NO_NEWS_FOUND)]

        return [ApiResponse.success(to_news_info(payload))]

    def _unexpected_error(self, exc: Exception) -> List[ApiResponse]:
        return [ApiResponse.error(NO_NEWS_FOUND)]

    def is_valid_date(self, value: str) -> bool:
        try:
            datetime.strptime(value, self.date_pattern)
        except ValueError:
            return False
        return True


def to_news_info(payload: RestNews) -> NewsInfo:
    articles = [
        Article(title=a.title)
        for a in payload.articles or []
        if a is not None and a.title
    ]
    return NewsInfo(articles=articles)
