"""
Parcel database model.

Customers register parcels; payment and delivery status live on the parcel.
"""

from sqlalchemy import Column, String, Float, JSON
from backend.app.db.session import Base
from backend.app.models.document import DocumentMixin
from backend.app.models.parcel_enums import PaymentStatus


class Parcel(DocumentMixin, Base):
    """
    Parcel model for the courier platform.

    A parcel is identified internally by its store-generated id and
    externally by its caller-assigned tracking_id, which correlates the
    parcel with its tracking events.
    """
    __tablename__ = "parcels"

    __document_fields__ = {
        "tracking_id": "tracking_id",
        "created_by": "created_by",
        "title": "title",
        "type": "parcel_type",
        "senderRegion": "sender_region",
        "receiverRegion": "receiver_region",
        "parcelWeight": "parcel_weight",
        "deliveryCost": "delivery_cost",
        "delivery_status": "delivery_status",
        "payment_status": "payment_status",
        "created_at": "created_at",
    }

    id = Column(String(32), primary_key=True)

    # Caller document, stored as sent
    body = Column(JSON, nullable=False, default=dict)

    # Typed copies for filtering and sorting (None when the value does not fit)
    tracking_id = Column(String(100), nullable=True, index=True)
    created_by = Column(String(255), nullable=True, index=True)

    # Summary fields
    title = Column(String(255), nullable=True)
    parcel_type = Column(String(50), nullable=True)
    sender_region = Column(String(100), nullable=True)
    receiver_region = Column(String(100), nullable=True)
    parcel_weight = Column(Float, nullable=True)
    delivery_cost = Column(Float, nullable=True)

    # Status
    delivery_status = Column(String(50), nullable=True)
    payment_status = Column(String(20), default=PaymentStatus.UNPAID.value, nullable=False, index=True)

    # Caller-supplied ISO timestamp, sorted lexically
    created_at = Column(String(64), nullable=True, index=True)

    def __repr__(self):
        return f"<Parcel(id={self.id}, tracking_id='{self.tracking_id}', payment_status='{self.payment_status}')>"
