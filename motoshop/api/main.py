"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, motoshop.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from motoshop.api.deps.dependencies import get_service_cache
from motoshop.configs import get_settings
from motoshop.observability import configure_logging, get_logger
from motoshop.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from .routers import (
    health_router,
    jobs_router,
    quick_notes_router,
    shops_router,
    tracking_router,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    # Startup
    settings = get_settings().app
    configure_logging(settings.log_level)
    logger.info("Starting %s", settings.app_name, extra={"environment": settings.environment})
    cache = get_service_cache()
    cache.synchronizer.attach_change_feed()
    logger.info("Job change feed attached")

    yield

    # Shutdown
    await cache.dispose()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings().app
    app = FastAPI(
        title=settings.app_name,
        description="Job intake, photo-based progress tracking and shop membership",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")
    app.include_router(tracking_router, prefix="/api/v1")
    app.include_router(shops_router, prefix="/api/v1")
    app.include_router(quick_notes_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings().app
    uvicorn.run(
        "motoshop.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )
