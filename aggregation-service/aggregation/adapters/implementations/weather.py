from typing import Optional

from aggregation.adapters.implementations.client_models import RestWeather, parse_weather
from aggregation.adapters.interfaces.external_api import ExternalSourceAdapter
from aggregation.domain.models.envelope import OK_STATUS, ApiResponse
from aggregation.domain.models.sources import WeatherInfo

CITY_NULL_ERROR = "City name must be provided."
NON_EXISTING_WEATHER = "Weather Not found."


class WeatherAdapter(ExternalSourceAdapter[RestWeather, ApiResponse]):
    """Current weather for a city in metric units."""

    CACHE_PREFIX = "Weather:"

    def __init__(self, *args, api_key: str, **kwargs):
        super().__init__(*args, **kwargs)
        self.api_key = api_key

    async def _fetch(self, key: Optional[str], **params) -> ApiResponse:
        if not key or not key.strip():
            self.logger.warning("Weather lookup called with null or empty city name")
            return ApiResponse.error(CITY_NULL_ERROR)

        cache_key = self.cache_key(key.strip().lower())
        payload = await self.load_payload(
            cache_key,
            "weather",
            {"q": key, "appid": self.api_key, "units": "metric"},
            parse=parse_weather,
            empty=RestWeather,
        )
        if not payload.weather:
            self.logger.info(f"Weather for city '{key}' not found")
            await self.evict(cache_key)
            return ApiResponse.error(NON_EXISTING_WEATHER)

        return ApiResponse.success(to_weather_info(payload), status=OK_STATUS)

    def _unexpected_error(self, exc: Exception) -> ApiResponse:
        return ApiResponse.error(NON_EXISTING_WEATHER)


def to_weather_info(payload: RestWeather) -> WeatherInfo:
    if payload.main is None or not payload.weather:
        return WeatherInfo(temperature=0, weather=NON_EXISTING_WEATHER)

    return WeatherInfo(
        temperature=payload.main.temp,
        weather=payload.weather[0].description or NON_EXISTING_WEATHER,
    )
