from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from aggregation.api.dependencies import (
    get_aggregation_service,
    get_cache_service,
    require_bearer_token,
)
from aggregation.core.logging import get_logger
from aggregation.infrastructure.cache.memory_cache import MemoryCache
from aggregation.services.aggregation_service import AggregationService

# Initialize router and logger
aggregate_router = APIRouter()
logger = get_logger(__name__)


class HealthStatus(BaseModel):
    """Health check response model."""
    status: str
    timestamp: datetime
    cache: Dict[str, Any]


@aggregate_router.get(
    "/getdata",
    status_code=status.HTTP_200_OK,
    summary="Aggregate country, weather and news",
    description=(
        "Resolves the country's capital, then returns its current weather "
        "and recent news together with an overall status."
    )
)
async def get_data(
    country_name: Optional[str] = Query(None, alias="countryName"),
    news_page_size: int = Query(0, alias="newsPageSize"),
    from_date: Optional[str] = Query(None, alias="fromDate"),
    claims: Dict[str, Any] = Depends(require_bearer_token),
    service: AggregationService = Depends(get_aggregation_service),
) -> Dict[str, Any]:
    """
    Aggregated data endpoint.

    Always answers 200; failures of individual sources are reported inside
    the body.
    """
    logger.info(f"Aggregate request from {claims.get('sub')} for country '{country_name}'")
    response = await service.aggregate(country_name, news_page_size, from_date)
    return response.to_dict()


@aggregate_router.get(
    "/healthcheck",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns health status of the service with cache statistics."
)
async def health_check(cache: MemoryCache = Depends(get_cache_service)) -> HealthStatus:
    logger.debug("Health check requested")
    return HealthStatus(
        status="Healthy",
        timestamp=datetime.now(timezone.utc),
        cache=await cache.get_stats(),
    )
