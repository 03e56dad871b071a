"""
User directory service.

Registration, self-service profile updates, search and role management.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import InvalidRequestError, ResourceNotFoundError
from backend.app.models.enums import UserRole
from backend.app.models.user import User
from backend.app.schemas.user import PROTECTED_USER_FIELDS, USER_SEARCH_FIELDS
from backend.app.services.audit import AuditAction, log_event

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class UserDirectory:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def register(self, document: Dict[str, Any]) -> Tuple[Optional[str], bool]:
        """
        Register a user, idempotently.

        Returns:
            (new user id, False) for a new user, (None, True) when the email
            is already registered
        """
        email = document.get("email")
        if not isinstance(email, str) or not email:
            raise InvalidRequestError("Email is required")

        if await self.get_by_email(email) is not None:
            return None, True

        user = User.from_document(document, role=UserRole.USER.value)
        self.db.add(user)

        try:
            await self.db.commit()
        except IntegrityError:
            # Concurrent registration of the same email won
            await self.db.rollback()
            return None, True

        logger.info(f"User {email} registered")
        return user.id, False

    async def update_self(self, email: str, fields: Dict[str, Any]) -> bool:
        """
        Merge profile fields into the user's document.

        email and role cannot be changed this way.

        Returns:
            True if anything changed

        Raises:
            ResourceNotFoundError: no user with this email
        """
        user = await self.get_by_email(email)
        if user is None:
            raise ResourceNotFoundError("User", email)

        changed = user.merge_fields(fields, protected=PROTECTED_USER_FIELDS)
        if changed:
            await self.db.commit()

        return changed

    async def search(self, query: Optional[str]) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on display name or email (max 10)."""
        if not query:
            raise InvalidRequestError("Query parameter is required")

        pattern = f"%{_escape_like(query)}%"
        result = await self.db.execute(
            select(User)
            .where(or_(
                User.display_name.ilike(pattern, escape="\\"),
                User.email.ilike(pattern, escape="\\"),
            ))
            .order_by(User.email)
            .limit(SEARCH_LIMIT)
        )
        return [user.to_document(USER_SEARCH_FIELDS) for user in result.scalars().all()]

    async def get_role(self, email: str) -> str:
        """Stored role of a user, "user" when none was ever set."""
        user = await self.get_by_email(email)
        if user is None:
            raise ResourceNotFoundError("User", email)
        return user.role or UserRole.USER.value

    async def update_role(self, user_id: str, role: Optional[str], actor_email: str) -> str:
        """
        Set a user's role (admin operation).

        Raises:
            InvalidRequestError: role outside {admin, editor, rider, user}
            ResourceNotFoundError: no user with this id
        """
        if role not in {r.value for r in UserRole}:
            raise InvalidRequestError("Invalid role", details={"allowed": [r.value for r in UserRole]})

        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", user_id)

        previous_role = user.role
        user.merge_fields({"role": role})

        await log_event(
            db=self.db,
            action=AuditAction.ROLE_CHANGED,
            actor_email=actor_email,
            target=user.email,
            metadata={"previous_role": previous_role, "new_role": role}
        )
        await self.db.commit()

        logger.info(f"Role of {user.email} changed from {previous_role} to {role} by {actor_email}")
        return role

    async def promote_to_rider(self, email: str) -> bool:
        """
        Set the role of the user with this email to rider.

        Part of the caller's transaction; the caller commits.

        Returns:
            True if a user with this email exists
        """
        user = await self.get_by_email(email)
        if user is None:
            return False
        user.merge_fields({"role": UserRole.RIDER.value})
        await self.db.flush()
        return True
