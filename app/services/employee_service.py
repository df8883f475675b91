"""
Employee service - registration, role management and balance lookup
"""
import logging
from typing import List, Optional

from app.core.config import settings
from app.core.exceptions import AlreadyExists, Forbidden, NotFound, ValidationError
from app.core.identity import Actor
from app.core.security import hash_password, validate_password
from app.models.employee import Employee, Role
from app.models.leave import PtoBalance
from app.repositories.base import UnitOfWork
from app.schemas.employee import EmployeeRegister
from app.services import balance_ledger as ledger
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

# Roles that can look at any employee's balance
BALANCE_VIEWER_ROLES = frozenset({Role.HR, Role.ADMIN, Role.TOP_MANAGEMENT})


def _check_email_domain(email: str, allowed_domain: Optional[str]) -> None:
    if not allowed_domain:
        return
    if not email.lower().endswith("@" + allowed_domain.lower()):
        raise ValidationError(f"Only @{allowed_domain} email addresses are allowed")


def register_employee(uow: UnitOfWork, data: EmployeeRegister) -> Employee:
    """
    Self-register an employee and open their PTO balance for the current year

    Args:
        uow: Unit of work
        data: Registration payload

    Returns:
        Created Employee instance (role EMPLOYEE)

    Raises:
        ValidationError: Bad password or disallowed email domain
        AlreadyExists: Email or employee code already registered
    """
    email = data.email.strip().lower()
    emp_code = data.emp_code.strip()
    _check_email_domain(email, settings.ALLOWED_EMAIL_DOMAIN)

    try:
        password = validate_password(data.password)
    except ValueError as e:
        raise ValidationError(str(e))

    with uow:
        if uow.employees.get_by_email(email) is not None:
            raise AlreadyExists("Email already registered")
        if uow.employees.get_by_emp_code(emp_code) is not None:
            raise AlreadyExists("Employee ID already registered")

        employee = Employee(
            emp_code=emp_code,
            email=email,
            name=data.name.strip(),
            position=data.position.strip(),
            department=data.department,
            role=Role.EMPLOYEE,
            password_hash=hash_password(password),
            active=True,
        )
        uow.employees.add(employee)

        ledger.initialize_balance(uow, employee.id, now_utc().year, settings.DEFAULT_PTO_CREDITS)
        uow.commit()

    logger.info("employee registered: employee_id=%s emp_code=%s", employee.id, employee.emp_code)
    return employee


def list_employees_with_balances(uow: UnitOfWork, actor: Actor, year: Optional[int] = None) -> List[dict]:
    """
    All employees with their balance for the year (HR/ADMIN)

    Returns:
        List of {"employee": Employee, "balance": PtoBalance | None}
    """
    if actor.role not in (Role.HR, Role.ADMIN):
        raise Forbidden("Only HR and admins can list employees")

    year = year or now_utc().year
    rows = []
    for employee in uow.employees.list_all():
        balance = next((b for b in employee.balances if b.year == year), None)
        rows.append({"employee": employee, "balance": balance})
    return rows


def update_employee_role(uow: UnitOfWork, actor: Actor, employee_id: int, role: Role) -> Employee:
    """
    Change an employee's role (ADMIN-only)

    Demoting to EMPLOYEE keeps existing approver assignments; the resolver
    ignores them for that role.
    """
    if actor.role != Role.ADMIN:
        raise Forbidden("Only admins can change employee roles")

    with uow:
        employee = uow.employees.get(employee_id)
        if employee is None:
            raise NotFound(f"Employee with id {employee_id} not found")
        previous_role = employee.role
        employee.role = role
        uow.employees.save(employee)
        uow.commit()

    logger.info(
        "employee role changed: employee_id=%s before=%s after=%s actor_id=%s",
        employee_id, previous_role.value, role.value, actor.id,
    )
    return employee


def get_employee_balance(
    uow: UnitOfWork,
    actor: Actor,
    employee_id: int,
    year: Optional[int] = None,
) -> PtoBalance:
    """
    Balance of an employee for a year (defaults to the current year)

    The employee themself, HR, ADMIN and TOP_MANAGEMENT may look it up.

    Raises:
        Forbidden, NotFound
    """
    if employee_id != actor.id and actor.role not in BALANCE_VIEWER_ROLES:
        raise Forbidden("You can only view your own balance")
    return ledger.get_balance(uow, employee_id, year or now_utc().year)
