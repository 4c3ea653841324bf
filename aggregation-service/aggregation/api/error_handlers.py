from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from aggregation.core.exceptions import APIException, AuthenticationError
from aggregation.core.logging import get_logger
from aggregation.domain.models.envelope import ApiResponse

# Initialize logger
logger = get_logger(__name__)


async def handle_api_exception(request: Request, exc: APIException) -> JSONResponse:
    """
    Handle APIException instances.

    Args:
        request: FastAPI request object
        exc: APIException instance

    Returns:
        JSONResponse: Formatted error response
    """
    logger.error(
        f"API Exception: {exc.detail}",
        extra={
            "data": {
                "status_code": exc.status_code,
                "error_code": exc.code,
                "context": exc.context
            }
        }
    )

    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers
    )


async def handle_validation_exception(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request validation errors.

    Args:
        request: FastAPI request object
        exc: RequestValidationError instance

    Returns:
        JSONResponse: Formatted validation error response
    """
    errors = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    logger.warning(f"Validation error on {request.url.path}", extra={"data": {"errors": errors}})

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": "validation_error",
                "message": "Request validation error",
                "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
                "context": {
                    "errors": errors
                }
            }
        }
    )


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle any exception no other handler claimed.

    The body is an error envelope carrying the exception text.
    """
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ApiResponse.error(str(exc)).to_dict()
    )
