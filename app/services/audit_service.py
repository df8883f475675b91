"""
Audit logging service
"""
from typing import List, Optional

from app.core.exceptions import Forbidden
from app.core.identity import Actor
from app.models.audit_log import LeaveAuditLog
from app.models.employee import Role
from app.models.leave import LeaveStatus
from app.repositories.base import UnitOfWork
from app.utils.datetime_utils import now_utc


def log_leave_action(
    uow: UnitOfWork,
    leave_request_id: int,
    actor_id: int,
    action: str,
    previous_status: Optional[LeaveStatus],
    new_status: Optional[LeaveStatus],
    remarks: Optional[str] = None,
    pto_deducted: Optional[int] = None,
    is_lwop: bool = False,
) -> LeaveAuditLog:
    """
    Append an audit entry for a leave request state change

    Args:
        uow: Unit of work the entry is written in (commits with the state change)
        leave_request_id: Affected leave request
        actor_id: ID of the user performing the action
        action: Human-readable action, e.g. "Filed leave request"
        previous_status: Status before the action (None when filing)
        new_status: Status after the action
        remarks: Approver remarks, if any
        pto_deducted: PTO days deducted by an approval
        is_lwop: Whether the request is LWOP

    Returns:
        Created LeaveAuditLog instance
    """
    entry = LeaveAuditLog(
        leave_request_id=leave_request_id,
        actor_id=actor_id,
        action=action,
        previous_status=previous_status,
        new_status=new_status,
        remarks=remarks,
        pto_deducted=pto_deducted,
        is_lwop=is_lwop,
        created_at=now_utc(),
    )
    return uow.audit_logs.append(entry)


def list_audit_logs(uow: UnitOfWork, actor: Actor, limit: int = 100) -> List[LeaveAuditLog]:
    """Most recent audit entries across all requests (ADMIN-only)."""
    if actor.role != Role.ADMIN:
        raise Forbidden("Only admins can view the full audit log")
    return uow.audit_logs.list(limit=limit)
