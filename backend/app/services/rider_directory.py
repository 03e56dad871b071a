"""
Rider directory service.

Rider applications and the activation flow that promotes an applicant to
the rider role.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import ConflictError, InvalidRequestError, ResourceNotFoundError
from backend.app.models.enums import RiderStatus
from backend.app.models.rider import RiderApplication
from backend.app.services.audit import AuditAction, log_event
from backend.app.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


class RiderDirectory:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserDirectory(db)

    async def apply(self, document: Dict[str, Any]) -> str:
        """
        Submit a rider application; new applications start pending.

        Raises:
            ConflictError: an application for this email already exists
        """
        email = document.get("email")
        if not isinstance(email, str) or not email:
            raise InvalidRequestError("Email is required")

        existing = await self.db.execute(
            select(RiderApplication.id).where(RiderApplication.email == email)
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("You have already submitted your application.")

        defaults = {}
        if document.get("created_at") is None:
            defaults["created_at"] = datetime.now(timezone.utc).isoformat()

        application = RiderApplication.from_document(document, status=RiderStatus.PENDING.value, **defaults)
        self.db.add(application)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("You have already submitted your application.")

        logger.info(f"Rider application {application.id} submitted by {email}")
        return application.id

    async def list(
        self,
        status: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Rider applications, newest first, optionally filtered by status
        ("all" = no filter).
        """
        query = select(RiderApplication).order_by(RiderApplication.created_at.desc(), RiderApplication.id)

        if status and status != ALL_STATUSES:
            query = query.where(RiderApplication.status == status)

        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return [application.to_document() for application in result.scalars().all()]

    async def update_status(
        self,
        rider_id: str,
        status: Optional[str],
        email: Optional[str],
        actor_email: str,
    ) -> bool:
        """
        Record an admin decision on a rider application.

        When the new status is exactly "active" and an email was supplied,
        the matching user is promoted to rider. The status change, the
        promotion and the audit entries commit together.

        Returns:
            True if a user was promoted
        """
        if status not in {s.value for s in RiderStatus}:
            raise InvalidRequestError("Invalid rider status", details={"allowed": [s.value for s in RiderStatus]})

        result = await self.db.execute(select(RiderApplication).where(RiderApplication.id == rider_id))
        application = result.scalar_one_or_none()
        if application is None:
            raise ResourceNotFoundError("Rider application", rider_id)

        previous_status = application.status
        application.merge_fields({"status": status})

        await log_event(
            db=self.db,
            action=AuditAction.RIDER_STATUS_CHANGED,
            actor_email=actor_email,
            target=rider_id,
            metadata={"previous_status": previous_status, "new_status": status}
        )

        promoted = False
        if status == RiderStatus.ACTIVE.value and email:
            promoted = await self.users.promote_to_rider(email)
            if promoted:
                await log_event(
                    db=self.db,
                    action=AuditAction.RIDER_PROMOTED,
                    actor_email=actor_email,
                    target=email,
                    metadata={"rider_id": rider_id}
                )
            else:
                logger.warning(f"Rider {rider_id} activated but no user is registered as {email}")

        await self.db.commit()
        return promoted
