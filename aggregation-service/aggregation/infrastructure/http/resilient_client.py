"""
HTTP transport shared by the source adapters.

Wraps ``httpx.AsyncClient`` with tenacity retries and a circuit breaker so
adapters only ever see a final status code and body.
"""
import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from aggregation.adapters.interfaces.connector import APIConnector, RequestConfig, TransportResponse
from aggregation.core.exceptions import TransportError
from aggregation.core.logging import get_logger
from aggregation.infrastructure.http.circuit_breaker import CircuitBreaker

logger = get_logger(__name__)


class RetryableStatusError(Exception):
    """Raised internally so tenacity retries a retryable status code."""

    def __init__(self, response: httpx.Response):
        super().__init__(f"Retryable status {response.status_code}")
        self.response = response


class ResilientHttpClient(APIConnector):
    """GET-only provider client with retry-with-backoff and circuit breaking."""

    def __init__(
        self,
        name: str,
        base_url: str,
        config: Optional[RequestConfig] = None,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Initialize the client.

        Args:
            name: Provider name used in logs and breaker errors
            base_url: Base URL every request path is resolved against
            config: Retry, timeout and breaker settings
            headers: Default headers sent with every request
            transport: Optional httpx transport, e.g. a MockTransport in tests
            circuit_breaker: Optional pre-built breaker
            sleep: Coroutine used between retry attempts
        """
        self.name = name
        self.config = config or RequestConfig()
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            name,
            failure_threshold=self.config.failure_threshold,
            reset_timeout=self.config.reset_timeout,
        )
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=httpx.Timeout(self.config.timeout),
            transport=transport,
        )

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> TransportResponse:
        self.circuit_breaker.before_call()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self.config.max_retries)),
            wait=wait_exponential(multiplier=self.config.backoff_factor, max=10),
            retry=retry_if_exception_type((httpx.TransportError, RetryableStatusError)),
            sleep=self._sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._client.get(path, params=params)
                    if response.status_code in self.config.retry_status_codes:
                        logger.debug(
                            f"{self.name} returned {response.status_code}, "
                            f"attempt {attempt.retry_state.attempt_number}"
                        )
                        raise RetryableStatusError(response)
        except RetryableStatusError as e:
            response = e.response
        except httpx.TransportError as e:
            self._record_failure()
            logger.error(f"{self.name} unreachable after {self.config.max_retries} attempts: {str(e)}")
            raise TransportError(
                detail=f"Error calling {self.name} API",
                context={"provider": self.name},
                original_exception=e,
            )
        except BaseException:
            # cancelled or failed outside the transport, no verdict on the provider
            self.circuit_breaker.release_probe()
            raise

        if response.status_code >= 500:
            self._record_failure()
        else:
            self.circuit_breaker.record_success()

        return TransportResponse(status_code=response.status_code, body=response.text)

    def _record_failure(self) -> None:
        self.circuit_breaker.record_failure()
        snapshot = self.circuit_breaker.snapshot()
        if snapshot.state == "open":
            logger.warning(
                f"Circuit for {self.name} open after {snapshot.consecutive_failures} "
                f"consecutive failures"
            )

    async def close(self) -> None:
        await self._client.aclose()
