"""
Aggregation Service - Country, weather and news in one response.

This package resolves a country to its capital, then fetches current weather
for the capital and recent news about the country, caching provider payloads
and merging the results into a single verdict.
"""

__version__ = "0.1.0"
