"""
Payment database model.

A payment exists if and only if its parcel is marked paid; both are
written in the same transaction by the payment coordinator.
"""

from sqlalchemy import Column, String, Float, DateTime, JSON
from backend.app.db.session import Base
from backend.app.models.document import DocumentMixin


class Payment(DocumentMixin, Base):
    """Immutable payment record."""
    __tablename__ = "payments"

    __document_fields__ = {
        "parcelId": "parcel_id",
        "email": "email",
        "amount": "amount",
        "paymentMethod": "payment_method",
        "transactionId": "transaction_id",
        "paid_at_string": "paid_at_string",
        "paid_at": "paid_at",
    }

    id = Column(String(32), primary_key=True)
    body = Column(JSON, nullable=False, default=dict)

    parcel_id = Column(String(32), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    payment_method = Column(String(255), nullable=True)
    transaction_id = Column(String(255), nullable=True)

    # Human-readable and sortable forms of the same instant
    paid_at_string = Column(String(64), nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<Payment(id={self.id}, parcel_id='{self.parcel_id}', amount={self.amount})>"
