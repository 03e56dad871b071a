"""
Tracking ledger.

Append-only event history per tracking_id. Events are never updated or
deleted; reads return the newest event first.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import InvalidRequestError
from backend.app.models.tracking_event import TrackingEvent

logger = logging.getLogger(__name__)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class TrackingLedger:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(self, document: Dict[str, Any]) -> str:
        """
        Append a tracking event.

        The event timestamp is always the server's current time; a
        client-supplied timestamp is discarded. The tracking_id is not
        checked against existing parcels.

        Returns:
            Store-generated event id
        """
        if _blank(document.get("tracking_id")) or _blank(document.get("status")):
            raise InvalidRequestError("Tracking ID and status are required")

        document = {k: v for k, v in document.items() if k != "timestamp"}
        event = TrackingEvent.from_document(document, timestamp=datetime.now(timezone.utc))

        self.db.add(event)
        await self.db.commit()

        logger.info(f"Tracking event '{event.status}' appended for {event.tracking_id}")
        return event.id

    async def history(self, tracking_id: str) -> List[Dict[str, Any]]:
        """All events for a tracking_id, most recent first (empty if none)."""
        result = await self.db.execute(
            select(TrackingEvent)
            .where(TrackingEvent.tracking_id == tracking_id)
            .order_by(TrackingEvent.timestamp.desc())
        )
        return [event.to_document() for event in result.scalars().all()]
