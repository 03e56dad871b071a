"""
Rider application Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class RiderApplicationCreate(BaseModel):
    """Schema for submitting a rider application."""
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = Field(None, description="Applicant email (required)")
    name: Optional[Any] = None
    region: Optional[Any] = None
    created_at: Optional[Any] = None


class RiderStatusUpdate(BaseModel):
    """Schema for an admin decision on a rider application."""
    status: Optional[str] = None
    email: Optional[str] = Field(None, description="Applicant email; promoted to rider when status is active")


class RiderListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[Dict[str, Any]]


class RiderStatusResponse(BaseModel):
    success: bool = True
    message: str
    promoted: bool
