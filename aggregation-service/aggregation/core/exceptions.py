from fastapi import status
from typing import Any, Dict, List, Optional


class APIException(Exception):
    """
    Base exception for API errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        code: str = "internal_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.detail,
                "status_code": self.status_code,
                "context": self.context
            }
        }


class AuthenticationError(APIException):
    """Exception raised when authentication fails."""

    def __init__(
        self,
        detail: str = "Authentication failed",
        code: str = "authentication_error",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            code=code,
            context=context
        )


class ConfigurationError(APIException):
    """Exception raised when required configuration is missing."""

    def __init__(
        self,
        detail: str = "Service is not configured correctly",
        code: str = "configuration_error",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            code=code,
            context=context
        )


class TransportError(APIException):
    """Exception raised when an external provider cannot be reached."""

    def __init__(
        self,
        detail: str = "External provider unavailable",
        code: str = "transport_error",
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            code=code,
            context=context
        )
        self.original_exception = original_exception

        if original_exception and self.context is not None:
            self.context["original_error"] = str(original_exception)


class CircuitOpenError(TransportError):
    """Exception raised when the circuit breaker rejects a call."""

    def __init__(self, provider: str, retry_after: float):
        super().__init__(
            detail=f"Circuit open for {provider}",
            code="circuit_open",
            context={"provider": provider, "retry_after": round(retry_after, 2)}
        )


class CacheError(APIException):
    """Exception raised when a cache operation fails."""

    def __init__(self, detail: str = "Cache operation failed", code: str = "cache_error"):
        super().__init__(detail=detail, code=code)


class AdaptorNotFoundError(APIException):
    """Exception raised when no adaptor is registered for a source."""

    def __init__(self, source: str, available: Optional[List[str]] = None):
        super().__init__(
            detail=f"Adaptor for source '{source}' not found in registry",
            code="adaptor_not_found",
            context={"source": source, "available": available or []}
        )
