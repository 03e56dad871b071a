"""
Tracking event database model.

Append-only ledger of status changes keyed by tracking_id.
"""

from sqlalchemy import Column, String, DateTime, JSON
from backend.app.db.session import Base
from backend.app.models.document import DocumentMixin


class TrackingEvent(DocumentMixin, Base):
    """
    Immutable tracking event.

    tracking_id refers to Parcel.tracking_id but is not a foreign key:
    events may be recorded before (or without) a matching parcel.
    """
    __tablename__ = "trackings"

    __document_fields__ = {
        "tracking_id": "tracking_id",
        "status": "status",
        "timestamp": "timestamp",
    }

    id = Column(String(32), primary_key=True)

    # Event as sent (location, message, updated_by, ...) plus the server timestamp
    body = Column(JSON, nullable=False, default=dict)

    tracking_id = Column(String(100), nullable=True, index=True)
    status = Column(String(100), nullable=True)

    # Server-assigned at insert time
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<TrackingEvent(id={self.id}, tracking_id='{self.tracking_id}', status='{self.status}')>"
