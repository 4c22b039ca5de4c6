"""
API v1 router setup
Organized into: public (booking page) and dashboard (business-side) routes
"""
from fastapi import APIRouter

from atlas.api.v1.public import booking
from atlas.api.v1.dashboard import appointments

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (client booking page)
# ============================================================================
api_v1_router.include_router(
    booking.router,
    prefix="/public",
    tags=["Public"]
)

# ============================================================================
# DASHBOARD ROUTES (business-side)
# ============================================================================
api_v1_router.include_router(
    appointments.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
def api_info():
    """API information and available route groups."""
    return {
        "version": "1.0",
        "groups": {
            "public": "/api/v1/public/businesses/{business_id}/...",
            "dashboard": "/api/v1/dashboard/...",
        }
    }
