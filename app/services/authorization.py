"""
Authorization resolver - who may approve/reject leave requests of a department.

Rules, evaluated in order:
- HR and ADMIN: any department.
- TOP_MANAGEMENT: any department when ApprovalPolicy.top_management_approves_all.
- MANAGER: departments they are a designated approver for; plus their own
  department when ApprovalPolicy.manager_approves_own_department.
- EMPLOYEE: none.

The pending queue an actor sees mirrors the same rule.
"""
from dataclasses import dataclass
from typing import Optional, Set

from app.core.exceptions import Forbidden
from app.core.identity import Actor
from app.models.employee import Department, Role
from app.repositories.base import ApproverRepository


@dataclass(frozen=True)
class ApprovalPolicy:
    top_management_approves_all: bool = False
    manager_approves_own_department: bool = False
    require_rejection_remarks: bool = False
    min_reason_length: int = 10

    @classmethod
    def from_settings(cls, settings) -> "ApprovalPolicy":
        return cls(
            top_management_approves_all=settings.TOP_MANAGEMENT_APPROVES_ALL,
            manager_approves_own_department=settings.MANAGER_APPROVES_OWN_DEPARTMENT,
            require_rejection_remarks=settings.REQUIRE_REJECTION_REMARKS,
            min_reason_length=settings.MIN_REASON_LENGTH,
        )


def default_policy() -> ApprovalPolicy:
    from app.core.config import settings
    return ApprovalPolicy.from_settings(settings)


def visible_departments(
    actor: Actor,
    approvers: ApproverRepository,
    policy: ApprovalPolicy,
) -> Optional[Set[Department]]:
    """
    Departments whose requests the actor may act on.

    Returns:
        None for every department, otherwise the (possibly empty) set
    """
    role = actor.role
    if role in (Role.HR, Role.ADMIN):
        return None
    if role == Role.TOP_MANAGEMENT:
        return None if policy.top_management_approves_all else set()
    if role == Role.MANAGER:
        departments = set(approvers.departments_for(actor.id))
        if policy.manager_approves_own_department:
            departments.add(actor.department)
        return departments
    if role == Role.EMPLOYEE:
        return set()
    raise ValueError(f"Unhandled role: {role!r}")


def can_act_on(
    actor: Actor,
    department: Department,
    approvers: ApproverRepository,
    policy: ApprovalPolicy,
) -> bool:
    """Check whether the actor may approve/reject requests filed under department."""
    departments = visible_departments(actor, approvers, policy)
    return departments is None or department in departments


def ensure_can_act(
    actor: Actor,
    department: Department,
    approvers: ApproverRepository,
    policy: ApprovalPolicy,
) -> None:
    """
    Raises:
        Forbidden: If the actor has no approval authority for the department
    """
    if not can_act_on(actor, department, approvers, policy):
        raise Forbidden(
            f"You do not have approval authority for the {department.value} department",
            details={"actor_id": actor.id, "department": department.value},
        )
