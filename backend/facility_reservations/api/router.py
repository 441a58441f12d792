"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from facility_reservations.api.routes import assets, calendar, reservations

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(reservations.router)
api_router.include_router(calendar.router)
api_router.include_router(assets.router)
