"""
Parcel Pydantic schemas.

Parcel documents are open-ended and stored exactly as sent; only the
response shapes are typed here.
"""

from pydantic import BaseModel, ConfigDict, Field
# Fields returned by the parcel list endpoint
PARCEL_SUMMARY_FIELDS = (
    "title",
    "tracking_id",
    "created_by",
    "senderRegion",
    "receiverRegion",
    "parcelWeight",
    "deliveryCost",
    "delivery_status",
    "payment_status",
    "created_at",
    "type",
)


class ParcelDeleteResponse(BaseModel):
    """Schema for parcel delete response."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    deleted_count: int = Field(..., alias="deletedCount")
