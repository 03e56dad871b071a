"""
Tracking API Endpoints.

Append-only tracking history per tracking_id.
"""

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.core.dependencies import get_current_user
from backend.app.db.session import get_db
from backend.app.schemas.common import InsertResponse
from backend.app.schemas.tracking import TrackingEventCreate
from backend.app.services.tracking_ledger import TrackingLedger

router = APIRouter(prefix="/trackings", tags=["Tracking"])


@router.post("", response_model=InsertResponse, status_code=status.HTTP_201_CREATED)
async def append_tracking_event(
    event_data: TrackingEventCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Append a tracking event; the server stamps the event time."""
    event_id = await TrackingLedger(db).append(event_data.model_dump(exclude_unset=True))
    return InsertResponse(message="Tracking info saved successfully", inserted_id=event_id)


@router.get("/{tracking_id}")
async def get_tracking_history(
    tracking_id: str = Path(..., description="Tracking ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Tracking history, most recent event first."""
    return await TrackingLedger(db).history(tracking_id)
