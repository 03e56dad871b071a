"""
Payment Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional


class PaymentIntentRequest(BaseModel):
    """Schema for creating a payment intent."""
    model_config = ConfigDict(populate_by_name=True)

    amount_in_cents: Optional[Any] = Field(None, alias="amountInCents", description="Amount in the smallest currency unit")


class PaymentIntentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(..., alias="clientSecret")


class RecordPaymentRequest(BaseModel):
    """Schema for recording a confirmed payment."""
    model_config = ConfigDict(populate_by_name=True)

    parcel_id: Optional[str] = Field(None, alias="parcelId")
    email: Optional[str] = None
    amount: Optional[float] = None
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    transaction_id: Optional[str] = Field(None, alias="transactionId")
