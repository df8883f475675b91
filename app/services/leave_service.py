"""
Leave service - lifecycle of a leave request (pending -> approved | rejected)

Every mutating operation runs in one unit of work: all guards are checked
before anything is written, and the balance, the request and the audit entry
are committed together.
"""
import logging
from datetime import date
from typing import Dict, List, Optional, Any

from app.core.config import settings
from app.core.exceptions import Forbidden, InvalidState, NotFound, ValidationError
from app.core.identity import Actor
from app.models.employee import Department, Role
from app.models.leave import LeaveRequest, LeaveStatus, LeaveType
from app.repositories.base import UnitOfWork
from app.services import balance_ledger as ledger
from app.services.audit_service import log_leave_action
from app.services.authorization import (
    ApprovalPolicy,
    can_act_on,
    default_policy,
    ensure_can_act,
    visible_departments,
)
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

# Roles that may file a request on behalf of another employee
FILE_ON_BEHALF_ROLES = frozenset({Role.HR, Role.ADMIN})


def calculate_total_days(start_date: date, end_date: date) -> int:
    """Inclusive calendar-day count between start_date and end_date."""
    return (end_date - start_date).days + 1


def validate_leave_dates(start_date: date, end_date: date) -> None:
    """
    Validate date order and that the leave stays within one calendar year
    (balances are tracked per year).

    Raises:
        ValidationError: If dates are out of order or span two years
    """
    if end_date < start_date:
        raise ValidationError("end_date must be on or after start_date")

    if start_date.year != end_date.year:
        raise ValidationError(
            f"Leave cannot span across years. Start date year: {start_date.year}, "
            f"end date year: {end_date.year}"
        )


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _get_request(uow: UnitOfWork, leave_request_id: int) -> LeaveRequest:
    leave_request = uow.leave_requests.get(leave_request_id)
    if leave_request is None:
        raise NotFound(f"Leave request with id {leave_request_id} not found")
    return leave_request


def _ensure_pending(leave_request: LeaveRequest, action: str) -> None:
    if leave_request.status != LeaveStatus.PENDING:
        raise InvalidState(
            f"Cannot {action} leave request with status {leave_request.status.value}",
            details={"leave_request_id": leave_request.id, "status": leave_request.status.value},
        )


def file_leave_request(
    uow: UnitOfWork,
    actor: Actor,
    leave_type: LeaveType,
    start_date: date,
    end_date: date,
    reason: str,
    department: Optional[Department] = None,
    approver_id: Optional[int] = None,
    employee_id: Optional[int] = None,
    policy: Optional[ApprovalPolicy] = None,
) -> LeaveRequest:
    """
    File a leave request (creates PENDING request)

    Args:
        uow: Unit of work
        actor: Who is filing
        leave_type: Type of leave
        start_date: First day of leave
        end_date: Last day of leave (inclusive)
        reason: Reason, at least policy.min_reason_length characters
        department: Department the request is filed under (defaults to the employee's)
        approver_id: Optional preferred approver, must be authorized for the department
        employee_id: Employee the leave is for (defaults to the actor)
        policy: Approval policy (defaults to settings)

    Returns:
        Created LeaveRequest instance

    Raises:
        ValidationError, NotFound, Forbidden
    """
    policy = policy or default_policy()
    employee_id = actor.id if employee_id is None else employee_id

    with uow:
        if employee_id != actor.id and actor.role not in FILE_ON_BEHALF_ROLES:
            raise Forbidden("You can only file leave requests for yourself")

        validate_leave_dates(start_date, end_date)

        cleaned_reason = _clean_text(reason) or ""
        if len(cleaned_reason) < policy.min_reason_length:
            raise ValidationError(
                f"Please provide a detailed reason (at least {policy.min_reason_length} characters)"
            )

        employee = uow.employees.get(employee_id)
        if employee is None or not employee.active:
            raise NotFound(f"Employee with id {employee_id} not found")

        department = department or employee.department

        if approver_id is not None:
            approver = uow.employees.get(approver_id)
            if approver is None or not approver.active:
                raise NotFound(f"Approver with id {approver_id} not found")
            if not can_act_on(Actor.from_employee(approver), department, uow.approvers, policy):
                raise ValidationError(
                    f"Employee {approver_id} is not an approver for the {department.value} department"
                )

        total_days = calculate_total_days(start_date, end_date)
        balance = ledger.get_or_open_balance(uow, employee_id, start_date.year, settings.DEFAULT_PTO_CREDITS)
        is_lwop = ledger.predict_lwop(balance, total_days)

        leave_request = LeaveRequest(
            employee_id=employee_id,
            leave_type=leave_type,
            department=department,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            reason=cleaned_reason,
            status=LeaveStatus.PENDING,
            is_lwop=is_lwop,
            approver_id=approver_id,
            filed_at=now_utc(),
        )
        uow.leave_requests.add(leave_request)

        log_leave_action(
            uow,
            leave_request_id=leave_request.id,
            actor_id=actor.id,
            action="Filed leave request",
            previous_status=None,
            new_status=LeaveStatus.PENDING,
            is_lwop=is_lwop,
        )
        uow.commit()

    logger.info(
        "leave request filed: leave_request_id=%s employee_id=%s days=%s is_lwop=%s",
        leave_request.id, employee_id, total_days, is_lwop,
    )
    return leave_request


def approve_leave_request(
    uow: UnitOfWork,
    actor: Actor,
    leave_request_id: int,
    remarks: Optional[str] = None,
    policy: Optional[ApprovalPolicy] = None,
) -> LeaveRequest:
    """
    Approve a leave request and deduct it from the employee's balance

    The LWOP flag from filing time is re-checked against the current balance:
    if approvals of other requests used up the credits in the meantime, the
    request is approved as LWOP (and therefore needs remarks).

    Raises:
        NotFound: Unknown request or missing balance
        InvalidState: Request is not pending
        Forbidden: Actor has no approval authority for the request's department
        ValidationError: LWOP approval without remarks
        Conflict: Balance or request changed concurrently
    """
    policy = policy or default_policy()

    with uow:
        leave_request = _get_request(uow, leave_request_id)
        _ensure_pending(leave_request, "approve")
        ensure_can_act(actor, leave_request.department, uow.approvers, policy)

        balance = uow.balances.get(leave_request.employee_id, leave_request.start_date.year, for_update=True)
        if balance is None:
            raise NotFound(
                f"No PTO balance for employee {leave_request.employee_id} "
                f"in year {leave_request.start_date.year}"
            )

        is_lwop = leave_request.is_lwop
        if not is_lwop and ledger.predict_lwop(balance, leave_request.total_days):
            logger.warning(
                "LWOP prediction outdated at approval: leave_request_id=%s days=%s remaining=%s",
                leave_request.id, leave_request.total_days, ledger.remaining(balance),
            )
            is_lwop = True

        remarks = _clean_text(remarks)
        if is_lwop and not remarks:
            raise ValidationError("LWOP approvals require remarks")

        deduction = ledger.apply_deduction(balance, leave_request.total_days, is_lwop)
        uow.balances.save(balance)

        previous_status = leave_request.status
        leave_request.status = LeaveStatus.APPROVED
        leave_request.is_lwop = is_lwop
        leave_request.approver_id = actor.id
        leave_request.approver_remarks = remarks
        leave_request.approved_at = now_utc()
        uow.leave_requests.save(leave_request)

        if is_lwop:
            action = (
                f"Approved LWOP request (PTO: {deduction.pto_days} days, "
                f"LWOP: {deduction.lwop_days} days)"
            )
        else:
            action = f"Approved leave request (PTO: {deduction.pto_days} days)"

        log_leave_action(
            uow,
            leave_request_id=leave_request.id,
            actor_id=actor.id,
            action=action,
            previous_status=previous_status,
            new_status=LeaveStatus.APPROVED,
            remarks=remarks,
            pto_deducted=deduction.pto_days,
            is_lwop=is_lwop,
        )
        uow.commit()

    logger.info(
        "leave status transition: leave_request_id=%s before=%s after=%s action=approve pto=%s lwop=%s",
        leave_request_id, previous_status.value, LeaveStatus.APPROVED.value,
        deduction.pto_days, deduction.lwop_days,
    )
    return leave_request


def reject_leave_request(
    uow: UnitOfWork,
    actor: Actor,
    leave_request_id: int,
    remarks: Optional[str] = None,
    policy: Optional[ApprovalPolicy] = None,
) -> LeaveRequest:
    """
    Reject a leave request (no balance change)

    Raises:
        NotFound, InvalidState, Forbidden
        ValidationError: Missing remarks when policy.require_rejection_remarks
        Conflict: Request changed concurrently
    """
    policy = policy or default_policy()

    with uow:
        leave_request = _get_request(uow, leave_request_id)
        _ensure_pending(leave_request, "reject")
        ensure_can_act(actor, leave_request.department, uow.approvers, policy)

        remarks = _clean_text(remarks)
        if policy.require_rejection_remarks and not remarks:
            raise ValidationError("Rejections require remarks")

        previous_status = leave_request.status
        leave_request.status = LeaveStatus.REJECTED
        leave_request.approver_id = actor.id
        leave_request.approver_remarks = remarks
        leave_request.approved_at = now_utc()
        uow.leave_requests.save(leave_request)

        log_leave_action(
            uow,
            leave_request_id=leave_request.id,
            actor_id=actor.id,
            action="Rejected leave request",
            previous_status=previous_status,
            new_status=LeaveStatus.REJECTED,
            remarks=remarks,
            is_lwop=False,
        )
        uow.commit()

    logger.info(
        "leave status transition: leave_request_id=%s before=%s after=%s action=reject",
        leave_request_id, previous_status.value, LeaveStatus.REJECTED.value,
    )
    return leave_request


def get_leave_request(
    uow: UnitOfWork,
    actor: Actor,
    leave_request_id: int,
    policy: Optional[ApprovalPolicy] = None,
) -> LeaveRequest:
    """Owner, or anyone with approval authority for its department, may view a request."""
    policy = policy or default_policy()
    leave_request = _get_request(uow, leave_request_id)
    if leave_request.employee_id == actor.id:
        return leave_request
    if actor.role == Role.TOP_MANAGEMENT or can_act_on(actor, leave_request.department, uow.approvers, policy):
        return leave_request
    raise Forbidden("You are not allowed to view this leave request")


def list_request_audit_logs(
    uow: UnitOfWork,
    actor: Actor,
    leave_request_id: int,
    policy: Optional[ApprovalPolicy] = None,
):
    """Audit trail of one request, visible to whoever may view the request."""
    get_leave_request(uow, actor, leave_request_id, policy)
    return uow.audit_logs.list(leave_request_id=leave_request_id)


def list_my_requests(uow: UnitOfWork, actor: Actor) -> List[LeaveRequest]:
    return uow.leave_requests.list_by_employee(actor.id)


def list_pending_requests(
    uow: UnitOfWork,
    actor: Actor,
    policy: Optional[ApprovalPolicy] = None,
) -> List[LeaveRequest]:
    """
    Pending requests the actor may act on

    - HR/ADMIN: all pending requests
    - MANAGER: requests of departments they are designated approver for
    - EMPLOYEE: empty list
    """
    policy = policy or default_policy()
    departments = visible_departments(actor, uow.approvers, policy)
    return uow.leave_requests.list_pending(departments)


def get_dashboard(uow: UnitOfWork, actor: Actor) -> Dict[str, Any]:
    """Status counts and the five most recent requests of the actor."""
    requests = uow.leave_requests.list_by_employee(actor.id)
    stats = {
        "pending": sum(1 for r in requests if r.status == LeaveStatus.PENDING),
        "approved": sum(1 for r in requests if r.status == LeaveStatus.APPROVED),
        "rejected": sum(1 for r in requests if r.status == LeaveStatus.REJECTED),
        "total": len(requests),
    }
    return {"stats": stats, "recent_requests": requests[:5]}
