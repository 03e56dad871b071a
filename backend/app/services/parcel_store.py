"""
Parcel store adapter.

CRUD surface over parcel documents, plus the conditional payment-status
transition used by the payment coordinator.
"""

import enum
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import InvalidRequestError
from backend.app.models.parcel import Parcel
from backend.app.models.parcel_enums import DeliveryStatus, PaymentStatus
from backend.app.schemas.parcel import PARCEL_SUMMARY_FIELDS

logger = logging.getLogger(__name__)


class ParcelTransition(str, enum.Enum):
    """Outcome of a conditional payment-status update."""
    UPDATED = "updated"
    NOT_FOUND = "not_found"
    ALREADY_PAID = "already_paid"


class ParcelStore:
    """Parcel collection operations bound to one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, document: Dict[str, Any]) -> str:
        """
        Insert a parcel document.

        Only tracking_id is required; every other field is stored as sent.
        New parcels always start unpaid; delivery_status and created_at get
        server defaults when absent.

        Returns:
            Store-generated parcel id

        Raises:
            InvalidRequestError: tracking_id missing or empty
        """
        tracking_id = document.get("tracking_id")
        if tracking_id is None or (isinstance(tracking_id, str) and not tracking_id.strip()):
            raise InvalidRequestError("Tracking ID is required")

        defaults = {}
        if document.get("delivery_status") is None:
            defaults["delivery_status"] = DeliveryStatus.CREATED.value
        if document.get("created_at") is None:
            defaults["created_at"] = datetime.now(timezone.utc).isoformat()

        parcel = Parcel.from_document(document, payment_status=PaymentStatus.UNPAID.value, **defaults)

        self.db.add(parcel)
        await self.db.commit()

        logger.info(f"Parcel {parcel.id} created with tracking_id {tracking_id}")
        return parcel.id

    async def list(
        self,
        created_by: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        List parcel summaries, newest first.

        Args:
            created_by: Optional owner email filter
            skip: Number of parcels to skip
            limit: Maximum parcels to return (None = all)
        """
        query = select(Parcel).order_by(Parcel.created_at.desc(), Parcel.id)

        if created_by:
            query = query.where(Parcel.created_by == created_by)

        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return [parcel.to_document(PARCEL_SUMMARY_FIELDS) for parcel in result.scalars().all()]

    async def get(self, parcel_id: str) -> Optional[Parcel]:
        result = await self.db.execute(select(Parcel).where(Parcel.id == parcel_id))
        return result.scalar_one_or_none()

    async def delete(self, parcel_id: str) -> bool:
        """
        Delete a parcel by id.

        Returns:
            True when exactly one parcel was deleted

        The caller commits.
        """
        result = await self.db.execute(delete(Parcel).where(Parcel.id == parcel_id))
        return result.rowcount == 1

    async def mark_paid(self, parcel_id: str) -> ParcelTransition:
        """
        Move a parcel from unpaid to paid.

        Reads first so a missing parcel and an already-paid parcel can be
        told apart, then applies a conditional update so two concurrent
        payments cannot both succeed. The caller commits.
        """
        parcel = await self.get(parcel_id)
        if parcel is None:
            return ParcelTransition.NOT_FOUND

        if parcel.payment_status == PaymentStatus.PAID.value:
            return ParcelTransition.ALREADY_PAID

        result = await self.db.execute(
            update(Parcel)
            .where(Parcel.id == parcel_id, Parcel.payment_status != PaymentStatus.PAID.value)
            .values(payment_status=PaymentStatus.PAID.value)
            .execution_options(synchronize_session="fetch")
        )

        if result.rowcount == 0:
            # Lost the race against a concurrent payment
            return ParcelTransition.ALREADY_PAID

        parcel.merge_fields({"payment_status": PaymentStatus.PAID.value})
        await self.db.flush()
        return ParcelTransition.UPDATED
