"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import (
    parcels, trackings, payments,
    users, riders, admin
)

router = APIRouter()

# Parcels & tracking
router.include_router(parcels.router)
router.include_router(trackings.router)

# Payment intent & payment records
router.include_router(payments.router)

# User and rider directory
router.include_router(users.router)
router.include_router(riders.router)

# Audit trail
router.include_router(admin.router)
