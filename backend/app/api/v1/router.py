"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import auth, users, vehicles, gps_locations

router = APIRouter()

# Authentication endpoints
router.include_router(auth.router)

# User management (admin)
router.include_router(users.router)

# Vehicle management
router.include_router(vehicles.router)
router.include_router(vehicles.stats_router)

# GPS locations and travel segments
router.include_router(gps_locations.router)
