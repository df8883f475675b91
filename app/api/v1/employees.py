"""
Employee management endpoints (HR/ADMIN)
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from app.core.deps import get_uow, require_roles
from app.core.identity import Actor
from app.models.employee import Role
from app.repositories.base import UnitOfWork
from app.schemas.balance import BalanceOut
from app.schemas.employee import EmployeeOut, EmployeeRoleUpdate, EmployeeWithBalanceOut
from app.services.employee_service import list_employees_with_balances, update_employee_role

router = APIRouter()


@router.get("", response_model=List[EmployeeWithBalanceOut])
async def list_employees_endpoint(
    year: Optional[int] = Query(None, description="Balance year (defaults to current year)"),
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(require_roles(Role.HR)),
):
    """List employees with their PTO balance (HR/ADMIN)"""
    rows = list_employees_with_balances(uow, actor, year)
    return [
        EmployeeWithBalanceOut(
            employee=EmployeeOut.model_validate(row["employee"]),
            balance=BalanceOut.model_validate(row["balance"]) if row["balance"] is not None else None,
        )
        for row in rows
    ]


@router.patch("/{employee_id}/role", response_model=EmployeeOut)
async def update_employee_role_endpoint(
    employee_id: int,
    data: EmployeeRoleUpdate,
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(require_roles(Role.ADMIN)),
):
    """Change an employee's role (ADMIN-only)"""
    return update_employee_role(uow, actor, employee_id, data.role)
