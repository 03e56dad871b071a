"""
User API Endpoints.

Registration, profile updates, search and role management.
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.core.dependencies import get_current_user
from backend.app.core.guards import require_admin, require_ownership
from backend.app.db.session import get_db
from backend.app.schemas.common import InsertResponse, MessageResponse
from backend.app.schemas.user import (
    RegisterExistsResponse, RoleResponse, RoleUpdateRequest, UserUpdateResponse
)
from backend.app.services.user_directory import UserDirectory

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=status.HTTP_201_CREATED, responses={200: {"model": RegisterExistsResponse}})
async def register_user(
    response: Response,
    user_data: Dict[str, Any] = Body(..., description="User profile; email is required, role is ignored"),
    db: AsyncSession = Depends(get_db)
):
    """
    Register a user (public).

    Registering an email twice is not an error: the second call answers 200
    with exists=true and changes nothing.
    """
    user_id, exists = await UserDirectory(db).register(user_data)

    if exists:
        response.status_code = status.HTTP_200_OK
        return RegisterExistsResponse(message="User already exists. Use PATCH to update login info.")

    return InsertResponse(message="User registered successfully", inserted_id=user_id).model_dump(by_alias=True)


@router.get("/search")
async def search_users(
    query: Optional[str] = Query(None, description="Part of a display name or email"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Find up to 10 users by display name or email (case-insensitive)."""
    return await UserDirectory(db).search(query)


@router.patch("/{email}", response_model=UserUpdateResponse)
async def update_user(
    email: str = Path(..., description="Email of the user to update"),
    fields: Dict[str, Any] = Body(...),
    current_user: dict = Depends(require_ownership),
    db: AsyncSession = Depends(get_db)
):
    """Merge profile fields into the caller's own user document."""
    modified = await UserDirectory(db).update_self(email, fields)
    message = "User info updated successfully" if modified else "No changes made"
    return UserUpdateResponse(message=message, modified=modified)


@router.patch("/{user_id}/role", response_model=MessageResponse)
async def update_user_role(
    role_data: RoleUpdateRequest,
    user_id: str = Path(..., description="User ID"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Change a user's role (admin only)."""
    role = await UserDirectory(db).update_role(user_id, role_data.role, actor_email=admin["email"])
    return MessageResponse(message=f"User role updated to {role}")


@router.get("/{email}/role", response_model=RoleResponse)
async def get_user_role(
    email: str = Path(..., description="User email"),
    db: AsyncSession = Depends(get_db)
):
    """Look up a user's role by email (public); defaults to "user"."""
    return RoleResponse(role=await UserDirectory(db).get_role(email))
