"""
Leave audit log endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, Query
from app.core.deps import get_uow, require_roles
from app.core.identity import Actor
from app.models.employee import Role
from app.repositories.base import UnitOfWork
from app.schemas.audit_log import LeaveAuditLogOut
from app.services.audit_service import list_audit_logs

router = APIRouter()


@router.get("", response_model=List[LeaveAuditLogOut])
async def list_audit_logs_endpoint(
    limit: int = Query(100, ge=1, le=1000),
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(require_roles(Role.ADMIN)),
):
    """Most recent audit entries across all leave requests (ADMIN-only)"""
    return list_audit_logs(uow, actor, limit=limit)
