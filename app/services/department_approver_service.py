"""
Department approver service - designated approvers per department
"""
import logging
from typing import List, Optional

from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.core.identity import Actor
from app.models.department_approver import DepartmentApprover
from app.models.employee import Department, Employee, Role
from app.repositories.base import UnitOfWork

logger = logging.getLogger(__name__)


def _ensure_admin(actor: Actor) -> None:
    if actor.role != Role.ADMIN:
        raise Forbidden("Only admins can manage department approvers")


def _get_assignee(uow: UnitOfWork, approver_id: int) -> Employee:
    """
    Validate the employee that will approve for a department

    Raises:
        NotFound: Unknown employee
        ValidationError: Inactive employee or plain EMPLOYEE role
    """
    approver = uow.employees.get(approver_id)
    if approver is None:
        raise NotFound(f"Employee with id {approver_id} not found")
    if not approver.active:
        raise ValidationError(f"Employee {approver_id} is inactive and cannot be an approver")
    if approver.role == Role.EMPLOYEE:
        raise ValidationError(
            f"Employee {approver_id} has the employee role. Promote them to manager before assigning."
        )
    return approver


def set_department_approver(
    uow: UnitOfWork,
    actor: Actor,
    department: Department,
    approver_id: int,
) -> DepartmentApprover:
    """
    Make approver_id the only approver of the department (single-slot variant)

    Args:
        uow: Unit of work
        actor: Must be ADMIN
        department: Department to configure
        approver_id: Employee who approves for the department

    Returns:
        The department's assignment after the change
    """
    _ensure_admin(actor)

    with uow:
        _get_assignee(uow, approver_id)

        existing = uow.approvers.list(department)
        kept = None
        for assignment in existing:
            if assignment.approver_id == approver_id and kept is None:
                kept = assignment
            else:
                uow.approvers.remove(assignment)

        if kept is None:
            kept = uow.approvers.add(DepartmentApprover(department=department, approver_id=approver_id))
        uow.commit()

    logger.info(
        "department approver set: department=%s approver_id=%s actor_id=%s",
        department.value, approver_id, actor.id,
    )
    return kept


def add_department_approver(
    uow: UnitOfWork,
    actor: Actor,
    department: Department,
    approver_id: int,
) -> DepartmentApprover:
    """Add an approver to the department; returns the existing assignment if already present."""
    _ensure_admin(actor)

    with uow:
        _get_assignee(uow, approver_id)

        assignment = uow.approvers.find(department, approver_id)
        if assignment is not None:
            return assignment

        assignment = uow.approvers.add(DepartmentApprover(department=department, approver_id=approver_id))
        uow.commit()

    logger.info(
        "department approver added: department=%s approver_id=%s actor_id=%s",
        department.value, approver_id, actor.id,
    )
    return assignment


def remove_department_approver(uow: UnitOfWork, actor: Actor, assignment_id: int) -> None:
    """
    Raises:
        Forbidden: Actor is not ADMIN
        NotFound: Unknown assignment
    """
    _ensure_admin(actor)

    with uow:
        assignment = uow.approvers.get(assignment_id)
        if assignment is None:
            raise NotFound(f"Department approver with id {assignment_id} not found")
        department, approver_id = assignment.department, assignment.approver_id
        uow.approvers.remove(assignment)
        uow.commit()

    logger.info(
        "department approver removed: department=%s approver_id=%s actor_id=%s",
        department.value, approver_id, actor.id,
    )


def list_department_approvers(
    uow: UnitOfWork,
    actor: Actor,
    department: Optional[Department] = None,
) -> List[DepartmentApprover]:
    _ensure_admin(actor)
    return uow.approvers.list(department)
