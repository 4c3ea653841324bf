from typing import List, Optional

from aggregation.adapters.implementations.client_models import RestCountry, parse_countries
from aggregation.adapters.interfaces.external_api import ExternalSourceAdapter
from aggregation.domain.models.envelope import ApiResponse
from aggregation.domain.models.sources import CountryData, CountryInfo

COUNTRY_NULL_ERROR = "Country name cannot be null or empty."
NO_COUNTRIES_FOUND_ERROR = "No countries found in the external API."
COUNTRY_NOT_FOUND_ERROR = "Country not found in the external API."
NO_CAPITAL_CITY_FOUND = "No capital city found"


class CountryInfoAdapter(ExternalSourceAdapter[List[RestCountry], ApiResponse]):
    """Resolves a country name to its capital using the full country list."""

    CACHE_PREFIX = "Country:"
    ALL_COUNTRIES_KEY = "all"

    async def _fetch(self, key: Optional[str], **params) -> ApiResponse:
        if not key or not key.strip():
            self.logger.warning("Country lookup called with null or empty country name")
            return ApiResponse.error(COUNTRY_NULL_ERROR)

        cache_key = self.cache_key(self.ALL_COUNTRIES_KEY)
        countries = await self.load_payload(
            cache_key,
            "all",
            {"fields": "cca2,name,capital"},
            parse=parse_countries,
            empty=list,
        )
        if not countries:
            self.logger.warning("No countries retrieved from external API")
            await self.evict(cache_key)
            return ApiResponse.error(NO_COUNTRIES_FOUND_ERROR)

        self.logger.debug(f"Matching '{key}' against {len(countries)} countries")
        match = find_country_by_name(countries, key.strip())
        if match is None:
            self.logger.info(f"Country '{key}' not found")
            await self.evict(cache_key)
            return ApiResponse.error(COUNTRY_NOT_FOUND_ERROR)

        data: CountryData = to_country_info(match)
        return ApiResponse.success(data)

    def _unexpected_error(self, exc: Exception) -> ApiResponse:
        return ApiResponse.error(f"Error retrieving country information: {str(exc)}")


def find_country_by_name(countries: List[RestCountry], name: str) -> Optional[RestCountry]:
    """
    Find a country by exact name, falling back to the first partial match.

    Both official and common names are compared case-insensitively; partial
    matches are taken in provider order.
    """
    needle = name.casefold()

    for country in countries:
        if country.name.official.casefold() == needle or country.name.common.casefold() == needle:
            return country

    for country in countries:
        if needle in country.name.official.casefold() or needle in country.name.common.casefold():
            return country

    return None


def to_country_info(country: RestCountry) -> CountryInfo:
    if not country.capital:
        return CountryInfo(name=country.name.common, capital_city=NO_CAPITAL_CITY_FOUND)
    return CountryInfo(name=country.name.common, capital_city=" ".join(country.capital))
