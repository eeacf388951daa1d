"""Main API routes for Health Links."""

from fastapi import APIRouter

from .admin_quota import router as admin_quota_router
from .health_links import router as health_links_router

# Main API router
router = APIRouter()

# Include sub-routers
router.include_router(health_links_router, tags=["health-links"])
router.include_router(admin_quota_router, prefix="/admin", tags=["admin"])
