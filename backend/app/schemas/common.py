"""
Shared response schemas.
"""

from pydantic import BaseModel, ConfigDict, Field


class InsertResponse(BaseModel):
    """Returned after a document has been inserted."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    inserted_id: str = Field(..., alias="insertedId")


class MessageResponse(BaseModel):
    message: str
