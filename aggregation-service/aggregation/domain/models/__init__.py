"""
Domain models package for the Aggregation Service.

Envelopes wrap every source result; source records hold the normalized
country, weather and news data carried inside them.
"""

from aggregation.domain.models.envelope import (
    AggregatedResponse,
    ApiResponse,
    ResponseStatus,
)
from aggregation.domain.models.sources import (
    Article,
    CountryData,
    CountryInfo,
    NewsInfo,
    WeatherInfo,
)
