from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import time
import uuid
from typing import Callable

from aggregation.api.dependencies import close_dependencies
from aggregation.api.error_handlers import (
    handle_api_exception,
    handle_unexpected_exception,
    handle_validation_exception,
)
from aggregation.core.config import get_settings, load_env_file
from aggregation.core.exceptions import APIException
from aggregation.core.logging import configure_logging, get_logger, set_correlation_id


# Load environment variables and configure logging early
load_env_file()
configure_logging()
logger = get_logger(__name__)


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = get_settings()

    # Create FastAPI app with metadata
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        debug=settings.DEBUG
    )

    # Register middleware
    configure_middleware(app)

    # Register exception handlers
    handle_exceptions(app)

    # Register routers
    register_routers(app)

    # Add startup and shutdown events
    @app.on_event("startup")
    async def startup_event():
        logger.info("Starting up Aggregation Service")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down Aggregation Service")
        await close_dependencies()

    return app


def configure_middleware(app: FastAPI) -> None:
    """
    Configure middleware components for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request tracking middleware
    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable):
        # Extract or generate correlation ID
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        # Track request timing
        start_time = time.time()

        try:
            response = await call_next(request)

            response.headers["X-Correlation-ID"] = correlation_id

            process_time = time.time() - start_time
            logger.info(
                "Request completed",
                extra={
                    "data": {
                        "request_path": request.url.path,
                        "method": request.method,
                        "status_code": response.status_code,
                        "process_time_ms": round(process_time * 1000, 2)
                    }
                }
            )

            return response
        except Exception as e:
            # Log exception and re-raise
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {str(e)}",
                extra={
                    "data": {
                        "request_path": request.url.path,
                        "method": request.method,
                        "process_time_ms": round(process_time * 1000, 2),
                        "error": str(e)
                    }
                },
                exc_info=True
            )
            raise


def handle_exceptions(app: FastAPI) -> None:
    """
    Configure global exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(APIException, handle_api_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)


def register_routers(app: FastAPI) -> None:
    """
    Register API routers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    # Import routers here to avoid circular imports
    from aggregation.api.routes.aggregate import aggregate_router
    from aggregation.api.routes.auth import auth_router

    app.include_router(
        aggregate_router,
        prefix=f"{settings.API_PREFIX}/aggregate",
        tags=["Aggregate"]
    )

    app.include_router(
        auth_router,
        prefix=f"{settings.API_PREFIX}/auth",
        tags=["Auth"]
    )


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("aggregation.main:app", host="0.0.0.0", port=8000, reload=True)
