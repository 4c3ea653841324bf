from dataclasses import dataclass, field
from typing import Any, Dict, List, Union


@dataclass(frozen=True)
class CountryInfo:
    """Country record with its capital city."""

    name: str
    capital_city: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "capitalCity": self.capital_city}


# Country results carry either a full record or just the capital name
CountryData = Union[CountryInfo, str]


@dataclass(frozen=True)
class WeatherInfo:
    """Current weather for a city."""

    temperature: float
    weather: str

    def to_dict(self) -> Dict[str, Any]:
        return {"temperature": self.temperature, "weather": self.weather}


@dataclass(frozen=True)
class Article:
    title: str

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title}


@dataclass(frozen=True)
class NewsInfo:
    """Headlines returned for a news query."""

    articles: List[Article] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"articles": [a.to_dict() for a in self.articles]}
