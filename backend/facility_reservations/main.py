"""
Facility Reservation API

Campus venue and vehicle reservations:
- Conflict detection between reservations of the same asset
- Approval workflow that declines conflicting requests automatically
- Month calendar with per-day counts filtered by the caller's role
- Optimistic locking on every status write (version column)
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from facility_reservations.api.errors import register_error_handlers
from facility_reservations.api.middleware import RequestLoggingMiddleware
from facility_reservations.api.router import api_router
from facility_reservations.core.config import get_settings
from facility_reservations.core.logging import get_logger, setup_logging
from facility_reservations.core.metrics import metrics_endpoint

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "service_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        calendar_grid_cells=settings.CALENDAR_GRID_CELLS,
        system_actor=settings.SYSTEM_ACTOR,
    )

    yield

    logger.info("service_stopped")


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Reservations for campus venues and vehicles, with conflict checks and approval cascades",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(application)
    application.include_router(api_router)

    @application.get("/health", tags=["Health"])
    async def health_check():
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    @application.get("/metrics", tags=["Health"], include_in_schema=False)
    def metrics():
        return metrics_endpoint()

    return application


app = create_app()
