"""
Parcel API Endpoints.

Customers register parcels and read or delete their own parcels.
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.core.config import settings
from backend.app.core.dependencies import get_current_user
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.core.guards import OwnershipGuard, require_ownership
from backend.app.db.session import get_db
from backend.app.schemas.common import InsertResponse
from backend.app.schemas.parcel import ParcelDeleteResponse
from backend.app.services.audit import AuditAction, log_event
from backend.app.services.parcel_store import ParcelStore

router = APIRouter(tags=["Parcels"])
ownership_guard = OwnershipGuard()


@router.post("/parcel", response_model=InsertResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: Dict[str, Any] = Body(..., description="Parcel document; tracking_id is required"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new parcel.

    Only tracking_id is required; all other fields are stored as sent.
    """
    parcel_id = await ParcelStore(db).create(parcel_data)
    return InsertResponse(message="Parcel saved successfully", inserted_id=parcel_id)


@router.get("/parcels")
async def list_parcels(
    email: Optional[str] = Query(None, description="Only parcels created by this email"),
    skip: int = Query(0, ge=0, description="Parcels to skip"),
    limit: Optional[int] = Query(None, ge=1, le=settings.max_page_size, description="Maximum parcels to return"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List parcel summaries, latest first."""
    return await ParcelStore(db).list(created_by=email, skip=skip, limit=limit)


@router.get("/parcel/{parcel_id}")
async def get_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    current_user: dict = Depends(require_ownership),
    db: AsyncSession = Depends(get_db)
):
    """
    Get the full parcel document.

    The caller must pass their own email (?email=) and own the parcel.
    """
    parcel = await ParcelStore(db).get(parcel_id)

    if not parcel:
        raise ResourceNotFoundError("Parcel", parcel_id)

    ownership_guard.enforce(parcel.created_by, current_user, "parcel")

    return parcel.to_document()


@router.delete("/parcel/{parcel_id}", response_model=ParcelDeleteResponse)
async def delete_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    current_user: dict = Depends(require_ownership),
    db: AsyncSession = Depends(get_db)
):
    """Delete a parcel the caller owns."""
    store = ParcelStore(db)
    parcel = await store.get(parcel_id)

    if not parcel:
        raise ResourceNotFoundError("Parcel", parcel_id)

    ownership_guard.enforce(parcel.created_by, current_user, "parcel")

    if not await store.delete(parcel_id):
        raise ResourceNotFoundError("Parcel", parcel_id)

    await log_event(
        db=db,
        action=AuditAction.PARCEL_DELETED,
        actor_email=current_user["email"],
        target=parcel_id,
        metadata={"tracking_id": parcel.tracking_id}
    )
    await db.commit()

    return ParcelDeleteResponse(success=True, message="Parcel deleted successfully", deleted_count=1)
