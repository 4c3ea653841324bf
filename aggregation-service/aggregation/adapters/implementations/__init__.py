"""
Adapter implementations for the external providers.
Each adapter wraps one provider: country data, current weather and news.
"""

from aggregation.adapters.implementations.country import CountryInfoAdapter
from aggregation.adapters.implementations.news import NewsAdapter
from aggregation.adapters.implementations.weather import WeatherAdapter

__all__ = [
    "CountryInfoAdapter",
    "NewsAdapter",
    "WeatherAdapter",
]
