"""
Payment API Endpoints.

Payment intent creation and payment recording.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.core.config import settings
from backend.app.core.dependencies import get_current_user
from backend.app.core.guards import require_ownership
from backend.app.core.payment_gateway import PaymentGateway, get_payment_gateway
from backend.app.db.session import get_db
from backend.app.schemas.common import InsertResponse
from backend.app.schemas.payment import PaymentIntentRequest, PaymentIntentResponse, RecordPaymentRequest
from backend.app.services.payment_coordinator import PaymentCoordinator

router = APIRouter(tags=["Payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    intent_data: PaymentIntentRequest,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway)
):
    """Create a card payment intent and return its client secret."""
    client_secret = await PaymentCoordinator(db, gateway).create_intent(intent_data.amount_in_cents)
    return PaymentIntentResponse(client_secret=client_secret)


@router.get("/payments")
async def list_payments(
    email: Optional[str] = Query(None, description="Payer email"),
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=settings.max_page_size),
    current_user: dict = Depends(require_ownership),
    db: AsyncSession = Depends(get_db)
):
    """Payment history of the caller, most recent first."""
    return await PaymentCoordinator(db).list_payments(email, skip=skip, limit=limit)


@router.post("/payments", response_model=InsertResponse, status_code=status.HTTP_201_CREATED)
async def record_payment(
    payment_data: RecordPaymentRequest,
    current_user: dict = Depends(require_ownership),
    db: AsyncSession = Depends(get_db)
):
    """
    Record a confirmed payment and mark the parcel paid.

    404 when the parcel does not exist (ERR_NOT_FOUND_001) or is already
    paid (ERR_ALREADY_PAID); no payment is recorded in either case.
    """
    payment_id = await PaymentCoordinator(db).record_payment(payment_data, actor_email=current_user["email"])
    return InsertResponse(message="Payment recorded and parcel marked as paid", inserted_id=payment_id)
