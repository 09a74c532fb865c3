"""API Routes module"""
from fastapi import APIRouter

from .auth import router as auth_router
from .tickets import router as tickets_router
from .dashboard import router as dashboard_router

# Main API router
api_router = APIRouter()

# Include all route modules
api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(tickets_router, tags=["Tickets"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])

__all__ = ["api_router"]
