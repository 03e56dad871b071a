"""
Security guards for role-based and ownership-based access control.

Provides dependencies for protecting endpoints.
"""

import logging
from typing import List, Optional
from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.core.dependencies import get_current_user
from backend.app.core.exceptions import InsufficientPermissionsError
from backend.app.db.session import get_db
from backend.app.models.enums import UserRole
from backend.app.models.user import User

logger = logging.getLogger(__name__)


async def load_role(db: AsyncSession, email: str) -> str:
    """Stored role for an email; unregistered callers count as plain users."""
    result = await db.execute(select(User.role).where(User.email == email))
    role = result.scalar_one_or_none()
    return role or UserRole.USER.value


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.

    The identity provider only vouches for the caller's email; the role is
    read from the user directory on every request.

    Usage:
        @router.patch("/users/{user_id}/role")
        async def update_role(current_user: dict = Depends(require_role([UserRole.ADMIN]))):
            ...

    Raises:
        InsufficientPermissionsError if the stored role is not in allowed_roles
    """
    async def role_checker(
        current_user: dict = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
    ) -> dict:
        role = await load_role(db, current_user["email"])

        if role not in {r.value for r in allowed_roles}:
            raise InsufficientPermissionsError(
                f"Access denied. Required role: {', '.join([r.value for r in allowed_roles])}"
            )

        return {**current_user, "role": role}

    return role_checker


require_admin = require_role([UserRole.ADMIN])


async def _body_email(request: Request) -> Optional[str]:
    try:
        body = await request.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("email")
    return None


async def require_ownership(
    request: Request,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    Ownership guard for self-scoped resources.

    The target identity is taken from the ``email`` query parameter, else the
    ``email`` path parameter, else the ``email`` field of the JSON body. The
    request is rejected unless it exactly equals the verified subject.

    Returns:
        Verified claims with the caller's stored ``role`` attached
    """
    subject = current_user.get("email")
    target = (
        request.query_params.get("email")
        or request.path_params.get("email")
        or await _body_email(request)
    )

    if not subject or subject != target:
        logger.warning(f"Ownership mismatch on {request.method} {request.url.path}: {subject!r} != {target!r}")
        raise InsufficientPermissionsError()

    return {**current_user, "role": await load_role(db, subject)}


def verify_ownership(resource_owner: Optional[str], current_user: dict) -> bool:
    """
    Verify that the current user owns the resource.

    Admins can access everything; documents without a recorded owner are
    accessible to any caller who passed the ownership guard.
    """
    if current_user.get("role") == UserRole.ADMIN.value:
        return True

    if not resource_owner:
        return True

    return resource_owner == current_user.get("email")


class OwnershipGuard:
    """
    Class-based ownership guard for documents carrying an owner email.

    Usage:
        ownership_guard = OwnershipGuard()

        @router.get("/parcel/{parcel_id}")
        async def get_parcel(parcel_id: str, current_user: dict = Depends(require_ownership), ...):
            parcel = await store.get(parcel_id)
            ownership_guard.enforce(parcel.created_by, current_user, "parcel")
            return parcel.to_document()
    """

    def enforce(
        self,
        resource_owner: Optional[str],
        current_user: dict,
        resource_name: str = "resource"
    ):
        """
        Enforce ownership validation, raise 403 if access denied.

        Args:
            resource_owner: Owner email of the resource
            current_user: Current authenticated user (with role)
            resource_name: Name of resource for error message
        """
        if not verify_ownership(resource_owner, current_user):
            raise InsufficientPermissionsError(
                f"Access denied. You do not have permission to access this {resource_name}."
            )
