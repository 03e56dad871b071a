"""
User directory Pydantic schemas.
"""

from pydantic import BaseModel
from typing import Optional

# Fields returned by the user search endpoint
USER_SEARCH_FIELDS = ("displayName", "email", "role")

# Fields a user may never set on their own document
PROTECTED_USER_FIELDS = ("_id", "email", "role")


class RoleUpdateRequest(BaseModel):
    """Schema for the admin role update."""
    role: Optional[str] = None


class RoleResponse(BaseModel):
    role: str


class RegisterExistsResponse(BaseModel):
    message: str
    exists: bool = True


class UserUpdateResponse(BaseModel):
    message: str
    modified: bool
