"""
Rider API Endpoints.

Rider applications and admin decisions on them.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.core.config import settings
from backend.app.core.dependencies import get_current_user
from backend.app.core.guards import require_admin, require_ownership
from backend.app.db.session import get_db
from backend.app.schemas.common import InsertResponse
from backend.app.schemas.rider import (
    RiderApplicationCreate, RiderListResponse, RiderStatusResponse, RiderStatusUpdate
)
from backend.app.services.rider_directory import RiderDirectory

router = APIRouter(prefix="/riders", tags=["Riders"])


@router.post("", response_model=InsertResponse, status_code=status.HTTP_201_CREATED)
async def apply_as_rider(
    application_data: RiderApplicationCreate,
    current_user: dict = Depends(require_ownership),
    db: AsyncSession = Depends(get_db)
):
    """Submit the caller's rider application (one per email)."""
    application_id = await RiderDirectory(db).apply(application_data.model_dump(exclude_unset=True))
    return InsertResponse(message="Application submitted successfully", inserted_id=application_id)


@router.get("", response_model=RiderListResponse)
async def list_riders(
    status_filter: Optional[str] = Query(None, alias="status", description="pending / active / rejected / all"),
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=settings.max_page_size),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List rider applications."""
    riders = await RiderDirectory(db).list(status=status_filter, skip=skip, limit=limit)
    return RiderListResponse(success=True, count=len(riders), data=riders)


@router.patch("/{rider_id}", response_model=RiderStatusResponse)
async def update_rider_status(
    decision: RiderStatusUpdate,
    rider_id: str = Path(..., description="Rider application ID"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Set a rider application's status (admin only).

    Activating with an email promotes that user to the rider role.
    """
    promoted = await RiderDirectory(db).update_status(
        rider_id, decision.status, decision.email, actor_email=admin["email"]
    )
    return RiderStatusResponse(success=True, message="Rider status updated successfully", promoted=promoted)
