"""
Main API Router
Aggregates all API endpoints for v1
"""

from fastapi import APIRouter
from heimeshow.api.v1.endpoints import auth, booking, health

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(booking.router, prefix="/booking", tags=["booking"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
