"""
Payment Coordinator (Domain Logic).

Two steps, called separately by the client:
1. create_intent: obtain a client secret from the payment gateway.
2. record_payment: after the gateway confirmed the charge, mark the parcel
   paid and write the payment record in one transaction.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import settings
from backend.app.core.exceptions import (
    InvalidRequestError,
    ParcelAlreadyPaidError,
    ResourceNotFoundError,
    UpstreamServiceError,
)
from backend.app.core.payment_gateway import PaymentGateway, PaymentGatewayError
from backend.app.core.reliability import CircuitOpenError
from backend.app.models.payment import Payment
from backend.app.schemas.payment import RecordPaymentRequest
from backend.app.services.audit import AuditAction, log_event
from backend.app.services.parcel_store import ParcelStore, ParcelTransition

logger = logging.getLogger(__name__)


def parse_amount_in_cents(value: Any) -> int:
    """
    Validate a client-supplied amount in cents.

    Accepts numbers and numeric strings greater than zero; the result is
    rounded to the nearest integer.

    Raises:
        InvalidRequestError: missing, non-numeric or not positive
    """
    if value is None or isinstance(value, bool):
        raise InvalidRequestError("Invalid amountInCents")

    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidRequestError("Invalid amountInCents")

    if math.isnan(amount) or math.isinf(amount) or amount <= 0:
        raise InvalidRequestError("Invalid amountInCents")

    return int(round(amount))


class PaymentCoordinator:
    """Payment intents and payment records, bound to one session."""

    def __init__(self, db: AsyncSession, gateway: Optional[PaymentGateway] = None):
        self.db = db
        self.gateway = gateway
        self.parcels = ParcelStore(db)

    async def create_intent(self, amount_in_cents: Any) -> str:
        """
        Create a payment intent for the given amount.

        Independent of parcel state; may be called before the client knows
        whether the charge will complete.

        Returns:
            Client secret for client-side confirmation
        """
        amount = parse_amount_in_cents(amount_in_cents)

        try:
            intent = await self.gateway.create_intent(amount, currency=settings.payment_currency)
        except (PaymentGatewayError, CircuitOpenError) as exc:
            logger.error(f"Payment intent creation failed: {exc}")
            raise UpstreamServiceError("payment_gateway", str(exc))

        return intent["client_secret"]

    async def record_payment(self, request: RecordPaymentRequest, actor_email: str) -> str:
        """
        Record a confirmed payment.

        Flow:
        1. Validate parcelId, email and amount
        2. Transition the parcel unpaid -> paid (conditional update)
        3. Insert the payment record
        4. Audit and commit both writes together

        Nothing is written when the parcel is missing or already paid.

        Returns:
            Id of the new payment record
        """
        if not request.parcel_id or not request.email or not request.amount:
            raise InvalidRequestError("parcelId, email, and amount are required")

        transition = await self.parcels.mark_paid(request.parcel_id)

        if transition == ParcelTransition.NOT_FOUND:
            raise ResourceNotFoundError("Parcel", request.parcel_id)
        if transition == ParcelTransition.ALREADY_PAID:
            raise ParcelAlreadyPaidError(request.parcel_id)

        paid_at = datetime.now(timezone.utc)
        document = request.model_dump(by_alias=True, exclude_none=True)
        payment = Payment.from_document(document, paid_at_string=paid_at.isoformat(), paid_at=paid_at)
        self.db.add(payment)

        await log_event(
            db=self.db,
            action=AuditAction.PAYMENT_RECORDED,
            actor_email=actor_email,
            target=request.parcel_id,
            metadata={
                "payment_id": payment.id,
                "amount": request.amount,
                "transaction_id": request.transaction_id,
            }
        )

        await self.db.commit()

        logger.info(f"Payment {payment.id} recorded, parcel {request.parcel_id} marked paid")
        return payment.id

    async def list_payments(
        self,
        email: Optional[str],
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Payment history for a payer, most recent first."""
        if not email:
            raise InvalidRequestError("Email is required")

        query = select(Payment).where(Payment.email == email).order_by(Payment.paid_at.desc())
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return [payment.to_document() for payment in result.scalars().all()]
