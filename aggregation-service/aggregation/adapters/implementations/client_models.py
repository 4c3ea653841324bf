"""Raw provider payload schemas, parsed with pydantic and cached as-is."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# restcountries.com

class CountryName(ProviderModel):
    common: str = ""
    official: str = ""


class RestCountry(ProviderModel):
    name: CountryName
    capital: List[str] = Field(default_factory=list)
    cca2: Optional[str] = None


_COUNTRY_LIST = TypeAdapter(List[RestCountry])


def parse_countries(body: str) -> List[RestCountry]:
    return _COUNTRY_LIST.validate_json(body)


# openweathermap.org

class WeatherCondition(ProviderModel):
    id: Optional[int] = None
    main: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None


class MainReadings(ProviderModel):
    temp: float = 0.0
    feels_like: Optional[float] = None
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    pressure: Optional[int] = None
    humidity: Optional[int] = None


class RestWeather(ProviderModel):
    name: Optional[str] = None
    weather: Optional[List[WeatherCondition]] = None
    main: Optional[MainReadings] = None
    cod: Optional[int] = None


def parse_weather(body: str) -> RestWeather:
    return RestWeather.model_validate_json(body)


# newsapi.org

class ArticleSource(ProviderModel):
    id: Optional[str] = None
    name: Optional[str] = None


class RestArticle(ProviderModel):
    source: Optional[ArticleSource] = None
    author: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    published_at: Optional[str] = Field(default=None, alias="publishedAt")


class RestNews(ProviderModel):
    status: Optional[str] = None
    total_results: int = Field(default=0, alias="totalResults")
    articles: Optional[List[RestArticle]] = None


def parse_news(body: str) -> RestNews:
    return RestNews.model_validate_json(body)
