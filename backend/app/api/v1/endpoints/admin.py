"""
Admin API Endpoints.

Read access to the audit trail.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.core.guards import require_admin
from backend.app.db.session import get_db
from backend.app.schemas.admin import AuditLogResponse, AuditTrailResponse
from backend.app.services.audit import get_audit_trail

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/audit-logs", response_model=AuditTrailResponse)
async def list_audit_logs(
    action: Optional[str] = Query(None, description="Filter by action, e.g. PAYMENT_RECORDED"),
    target: Optional[str] = Query(None, description="Filter by document id or email"),
    limit: int = Query(100, ge=1, le=500),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Most recent audit entries (admin only)."""
    logs = await get_audit_trail(db, action=action, target=target, limit=limit)
    return AuditTrailResponse(
        logs=[AuditLogResponse.model_validate(log) for log in logs],
        total=len(logs)
    )
