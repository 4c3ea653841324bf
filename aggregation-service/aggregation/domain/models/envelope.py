from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ResponseStatus(str, Enum):
    """Status vocabulary shared by source results and the aggregate."""
    SUCCESS = "Success"
    ERROR = "Error"
    NOT_FOUND = "NotFound"
    BAD_REQUEST = "BadRequest"
    UNAUTHORIZED = "Unauthorized"


# Weather results report success with this label instead of SUCCESS
OK_STATUS = "OK"

SUCCESS_MESSAGE = "All data aggregated successfully."
PARTIAL_FAILURE_MESSAGE = "Some errors occurred. Check internal messages for details."
REJECTED_MESSAGE = "An error occurred while processing your request. See internal messages for details."


def _serialize(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    return value


@dataclass(frozen=True)
class ApiResponse:
    """
    Envelope returned by every source call.

    ``data`` is only populated when ``status`` denotes success for the
    source that produced it.
    """

    message: str
    status: str
    data: Optional[Any] = None

    @classmethod
    def success(cls, data: Any, status: str = ResponseStatus.SUCCESS.value) -> "ApiResponse":
        return cls(message="Success", status=status, data=data)

    @classmethod
    def error(cls, message: str, status: str = ResponseStatus.ERROR.value) -> "ApiResponse":
        return cls(message=message, status=status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "status": self.status,
            "data": _serialize(self.data),
        }


@dataclass(frozen=True)
class AggregatedResponse:
    """Merged outcome of one aggregation request."""

    results: List[ApiResponse] = field(default_factory=list)
    status: str = ResponseStatus.SUCCESS.value
    message: str = SUCCESS_MESSAGE

    @classmethod
    def from_results(cls, results: List[ApiResponse]) -> "AggregatedResponse":
        """
        Derive the overall verdict from the merged results.

        Only the generic ERROR label marks a failure; other error
        sub-classes on individual results leave the verdict untouched.
        """
        first_error = next(
            (r for r in results if r.status == ResponseStatus.ERROR.value), None
        )
        if first_error is None:
            return cls(list(results), ResponseStatus.SUCCESS.value, SUCCESS_MESSAGE)
        return cls(list(results), ResponseStatus.ERROR.value, PARTIAL_FAILURE_MESSAGE)

    @classmethod
    def rejected(cls, status: ResponseStatus, message: str) -> "AggregatedResponse":
        """Build the single-entry response used when aggregation stops early."""
        return cls(
            results=[ApiResponse(message=message, status=status.value)],
            status=status.value,
            message=REJECTED_MESSAGE,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aggregate": [r.to_dict() for r in self.results],
            "status": self.status,
            "message": self.message,
        }
