"""
FastAPI application for the ATLAS scheduling core

Slot listing, booking, rescheduling and status changes; notifications and the
completion sweep run in Celery workers
"""
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from contextlib import asynccontextmanager

from atlas.config.settings import get_settings
from atlas.core.exceptions import ConflictError, NotFoundError, SchedulingError
from atlas.core.middleware import correlation_id_middleware, request_logging_middleware
from atlas.core.monitoring import health_router
from atlas.api.v1.router import api_v1_router
from atlas.utils.my_logging import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    setup_logging()
    routes = sorted(
        (route.path, method)
        for route in app.routes if isinstance(route, APIRoute)
        for method in route.methods
    )
    logger.info(f"ATLAS scheduling API starting up ({len(routes)} routes)")
    for path, method in routes:
        logger.debug(f"  {method:8} {path}")

    yield

    # Shutdown
    logger.info("ATLAS scheduling API shutting down...")


def _status_for(exc: SchedulingError) -> int:
    if isinstance(exc, ConflictError):
        return 409
    if isinstance(exc, NotFoundError):
        return 404
    return 422


async def scheduling_error_handler(request: Request, exc: SchedulingError):
    """Map scheduling errors onto HTTP statuses with a stable error body"""
    status_code = _status_for(exc)
    if status_code == 409:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.error_code} ({exc.message})")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title="ATLAS Scheduling API",
        description="Working hours, slot availability and race-free booking",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "PUT"],
        allow_headers=["*"],
    )

    # Add custom middleware (last added runs first)
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(correlation_id_middleware)

    app.add_exception_handler(SchedulingError, scheduling_error_handler)

    # Include routers
    app.include_router(health_router, prefix="/health", tags=["monitoring"])
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/")
    def root():
        return {
            "service": settings.APP_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "api": "/api/v1/",
                "health": "/health",
                "docs": "/docs" if settings.DEBUG else "disabled"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "atlas.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
