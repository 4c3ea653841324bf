from functools import lru_cache
from typing import Any, List, Optional
import os

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# .NET style tokens accepted in NEWS_DATE_FORMAT, mapped to strptime directives
_DATE_TOKENS = (
    ("yyyy", "%Y"),
    ("MM", "%m"),
    ("dd", "%d"),
    ("HH", "%H"),
    ("mm", "%M"),
    ("ss", "%S"),
)


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # API settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Aggregation Service"
    DEBUG: bool = False

    # CORS settings
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Cache settings
    CACHE_DURATION_MINUTES: int = 60
    CACHE_CLEANUP_INTERVAL: int = 60  # seconds

    # External providers
    COUNTRY_BASE_URL: str = "https://restcountries.com/v3.1/"
    WEATHER_BASE_URL: str = "https://api.openweathermap.org/data/2.5/"
    NEWS_BASE_URL: str = "https://newsapi.org/v2/"
    OPENWEATHER_API_KEY: str = "DummyApiKey"
    NEWS_API_KEY: str = "DummyApiKey"

    # News settings
    NEWS_DATE_FORMAT: str = "yyyy-MM-dd"
    DEFAULT_NEWS_PAGE_SIZE: int = 10
    DEFAULT_FROM_DATE_OFFSET_DAYS: int = 5

    # External API timeout settings
    DEFAULT_TIMEOUT: int = 10  # seconds
    MAX_RETRIES: int = 3
    RETRY_BACKOFF_FACTOR: float = 0.3
    CIRCUIT_BREAKER_FAILURE_THRESHOLD: int = 5
    CIRCUIT_BREAKER_RESET_SECONDS: int = 30
    USER_AGENT: str = "ApiAggregation/1.0"

    # Authentication settings
    JWT_USERNAME: str = "admin"
    JWT_PASSWORD: str = "admin"
    JWT_SECRET_KEY: Optional[str] = None
    JWT_ISSUER: str = "ApiAggregation"
    JWT_AUDIENCE: str = "ApiAggregationClients"
    JWT_ALGORITHM: str = "HS256"
    TOKEN_EXPIRATION_MINUTES: int = 60

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Any) -> List[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    @property
    def cache_ttl_seconds(self) -> int:
        """Cache TTL expressed in seconds."""
        return self.CACHE_DURATION_MINUTES * 60

    @property
    def news_date_pattern(self) -> str:
        """NEWS_DATE_FORMAT translated to a strptime pattern."""
        pattern = self.NEWS_DATE_FORMAT
        for token, directive in _DATE_TOKENS:
            pattern = pattern.replace(token, directive)
        return pattern


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
