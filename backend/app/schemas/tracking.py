"""
Tracking event Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional


class TrackingEventCreate(BaseModel):
    """
    Schema for appending a tracking event.

    Extra fields (location, message, updated_by, ...) are stored as event
    metadata. A client-supplied timestamp is discarded.
    """
    model_config = ConfigDict(extra="allow")

    tracking_id: Optional[Any] = Field(None, description="Tracking identifier of the parcel")
    status: Optional[Any] = Field(None, description="Free-form status label")
