from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from aggregation.adapters.factory import COUNTRY, NEWS, WEATHER, AdaptorFactory
from aggregation.core.config import Settings, get_settings
from aggregation.core.exceptions import AuthenticationError
from aggregation.core.logging import get_logger
from aggregation.infrastructure.auth.jwt_auth import JwtTokenHandler
from aggregation.infrastructure.cache.memory_cache import MemoryCache
from aggregation.services.aggregation_service import AggregationService

# Initialize logger
logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache()
def get_cache_service() -> MemoryCache:
    """
    Dependency for providing the process-wide cache.

    Returns:
        MemoryCache: The single cache shared by every adaptor
    """
    settings = get_settings()
    return MemoryCache(
        default_ttl=settings.cache_ttl_seconds,
        cleanup_interval=settings.CACHE_CLEANUP_INTERVAL,
    )


@lru_cache()
def get_adaptor_factory() -> AdaptorFactory:
    """
    Dependency for providing the adaptor factory.

    Returns:
        AdaptorFactory: Factory bound to the shared cache
    """
    return AdaptorFactory(get_settings(), get_cache_service())


@lru_cache()
def get_aggregation_service() -> AggregationService:
    """
    Dependency for providing the aggregation service.

    Returns:
        AggregationService: Service wired with the country, weather and news adaptors
    """
    settings = get_settings()
    factory = get_adaptor_factory()
    return AggregationService(
        country=factory.create_adaptor(COUNTRY),
        weather=factory.create_adaptor(WEATHER),
        news=factory.create_adaptor(NEWS),
        default_page_size=settings.DEFAULT_NEWS_PAGE_SIZE,
        from_date_offset_days=settings.DEFAULT_FROM_DATE_OFFSET_DAYS,
        date_pattern=settings.news_date_pattern,
    )


def get_auth_service(settings: Settings = Depends(get_settings)) -> JwtTokenHandler:
    """
    Dependency for providing the authentication service.

    Returns:
        JwtTokenHandler: Token handler bound to the current settings
    """
    return JwtTokenHandler(settings)


async def require_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: JwtTokenHandler = Depends(get_auth_service)
) -> Dict[str, Any]:
    """
    Validate the bearer token sent in the Authorization header.

    Returns:
        Dict[str, Any]: Claims of the validated token

    Raises:
        AuthenticationError: If the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        logger.warning("Request without bearer token rejected")
        raise AuthenticationError(detail="Missing bearer token", code="missing_token")

    return auth_service.validate_token(credentials.credentials)


async def close_dependencies() -> None:
    """Release HTTP clients held by the adaptor factory and empty the cache."""
    if get_adaptor_factory.cache_info().currsize:
        await get_adaptor_factory().close()
    if get_cache_service.cache_info().currsize:
        removed = await get_cache_service().flush()
        logger.info(f"Dropped {removed} cached payloads on shutdown")
