from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class RequestConfig:
    """Configuration for API requests including retry and timeout settings."""

    def __init__(
        self,
        max_retries: int = 3,
        timeout: float = 10,
        backoff_factor: float = 0.3,
        retry_status_codes: List[int] = None,
        failure_threshold: int = 5,
        reset_timeout: float = 30.0
    ):
        """
        Initialize RequestConfig with retry, timeout and breaker settings.

        Args:
            max_retries: Maximum number of attempts per request
            timeout: Request timeout in seconds
            backoff_factor: Backoff factor for exponential retry delay
            retry_status_codes: List of HTTP status codes to retry on
            failure_threshold: Consecutive failures before the circuit opens
            reset_timeout: Seconds the circuit stays open before a probe
        """
        self.max_retries = max_retries
        self.timeout = timeout
        self.backoff_factor = backoff_factor
        self.retry_status_codes = retry_status_codes or [429, 500, 502, 503, 504]
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout


@dataclass(frozen=True)
class TransportResponse:
    """Final status code and raw body of a provider call."""

    status_code: int
    body: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class APIConnector(ABC):
    """
    Abstract base interface for API connectors.

    Connectors own communication with one external provider, including
    retries and circuit breaking, and hand back the final status and body.
    """

    @abstractmethod
    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> TransportResponse:
        """
        Issues a GET request relative to the provider base URL.

        Args:
            path: Resource path relative to the base URL
            params: Optional query parameters

        Returns:
            TransportResponse: The final status code and body

        Raises:
            TransportError: If the provider could not be reached after retries
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Releases the underlying connection pool."""
        pass
