"""
Audit logging service for tracking payments and privileged actions.

Entries are added to the caller's transaction so an audited change and its
audit record commit (or roll back) together.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from backend.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    PARCEL_DELETED = "PARCEL_DELETED"
    PAYMENT_RECORDED = "PAYMENT_RECORDED"
    ROLE_CHANGED = "ROLE_CHANGED"
    RIDER_STATUS_CHANGED = "RIDER_STATUS_CHANGED"
    RIDER_PROMOTED = "RIDER_PROMOTED"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_email: Optional[str] = None,
    target: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Add an audit entry to the current transaction.

    The caller commits.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        actor_email: Verified email of the user performing the action
        target: Document id or email the action applies to
        metadata: Additional context as JSON

    Returns:
        Pending AuditLog instance
    """
    audit_log = AuditLog(
        actor_email=actor_email,
        action=action,
        target=target,
        meta_data=metadata,
    )

    db.add(audit_log)
    await db.flush()

    return audit_log


async def get_audit_trail(
    db: AsyncSession,
    action: Optional[str] = None,
    target: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering.

    Args:
        db: Database session
        action: Filter by action type
        target: Filter by target id/email
        limit: Maximum number of records to return

    Returns:
        List of AuditLog instances, most recent first
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if action:
        query = query.where(AuditLog.action == action)

    if target:
        query = query.where(AuditLog.target == target)

    query = query.limit(limit)

    result = await db.execute(query)
    return result.scalars().all()
