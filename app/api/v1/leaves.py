"""
Leave endpoints
"""
from typing import List
from fastapi import APIRouter, Depends
from app.core.deps import get_uow, get_current_actor
from app.core.identity import Actor
from app.repositories.base import UnitOfWork
from app.schemas.audit_log import LeaveAuditLogOut
from app.schemas.leave import (
    LeaveApplyRequest,
    LeaveOut,
    ApprovalActionRequest,
    RejectActionRequest,
    DashboardOut,
)
from app.services import leave_service

router = APIRouter()


@router.post("", response_model=LeaveOut, status_code=201)
async def file_leave_endpoint(
    leave_data: LeaveApplyRequest,
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(get_current_actor),
):
    """
    File a leave request (creates PENDING request)

    Validations:
    - start_date <= end_date, both in the same year
    - reason at least 10 characters
    - is_lwop is set when the request exceeds the remaining PTO credits
    """
    return leave_service.file_leave_request(
        uow,
        actor,
        leave_type=leave_data.leave_type,
        start_date=leave_data.start_date,
        end_date=leave_data.end_date,
        reason=leave_data.reason,
        department=leave_data.department,
        approver_id=leave_data.approver_id,
        employee_id=leave_data.employee_id,
    )


@router.get("/my", response_model=List[LeaveOut])
async def list_my_leaves_endpoint(
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(get_current_actor),
):
    """List the current user's leave requests, newest first"""
    return leave_service.list_my_requests(uow, actor)


@router.get("/pending", response_model=List[LeaveOut])
async def list_pending_endpoint(
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(get_current_actor),
):
    """
    Pending requests the current user may approve or reject

    - HR/ADMIN: all departments
    - MANAGER: departments they are a designated approver for
    - EMPLOYEE: none
    """
    return leave_service.list_pending_requests(uow, actor)


@router.get("/dashboard", response_model=DashboardOut)
async def dashboard_endpoint(
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(get_current_actor),
):
    """Own request counts and the five most recent requests"""
    return leave_service.get_dashboard(uow, actor)


@router.get("/{leave_request_id}", response_model=LeaveOut)
async def get_leave_endpoint(
    leave_request_id: int,
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(get_current_actor),
):
    return leave_service.get_leave_request(uow, actor, leave_request_id)


@router.post("/{leave_request_id}/approve", response_model=LeaveOut)
async def approve_leave_endpoint(
    leave_request_id: int,
    action: ApprovalActionRequest,
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(get_current_actor),
):
    """
    Approve a PENDING leave request and deduct it from the balance

    Remarks are required when the request is LWOP.
    """
    return leave_service.approve_leave_request(uow, actor, leave_request_id, remarks=action.remarks)


@router.post("/{leave_request_id}/reject", response_model=LeaveOut)
async def reject_leave_endpoint(
    leave_request_id: int,
    action: RejectActionRequest,
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(get_current_actor),
):
    """Reject a PENDING leave request (no balance change)"""
    return leave_service.reject_leave_request(uow, actor, leave_request_id, remarks=action.remarks)


@router.get("/{leave_request_id}/audit-logs", response_model=List[LeaveAuditLogOut])
async def leave_audit_logs_endpoint(
    leave_request_id: int,
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(get_current_actor),
):
    """Audit trail of one leave request, newest first"""
    return leave_service.list_request_audit_logs(uow, actor, leave_request_id)
