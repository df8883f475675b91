"""
Department approver endpoints (ADMIN-only)
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from app.core.deps import get_uow, require_roles
from app.core.identity import Actor
from app.models.employee import Department, Role
from app.repositories.base import UnitOfWork
from app.schemas.department_approver import DepartmentApproverRequest, DepartmentApproverOut
from app.services import department_approver_service as approvers

router = APIRouter()


@router.get("", response_model=List[DepartmentApproverOut])
async def list_department_approvers_endpoint(
    department: Optional[Department] = Query(None, description="Filter by department"),
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(require_roles(Role.ADMIN)),
):
    return approvers.list_department_approvers(uow, actor, department)


@router.post("", response_model=DepartmentApproverOut, status_code=201)
async def add_department_approver_endpoint(
    data: DepartmentApproverRequest,
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(require_roles(Role.ADMIN)),
):
    """Add an approver to a department (returns the existing assignment if already assigned)"""
    return approvers.add_department_approver(uow, actor, data.department, data.approver_id)


@router.put("", response_model=DepartmentApproverOut)
async def set_department_approver_endpoint(
    data: DepartmentApproverRequest,
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(require_roles(Role.ADMIN)),
):
    """Make the given employee the only approver of the department"""
    return approvers.set_department_approver(uow, actor, data.department, data.approver_id)


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_department_approver_endpoint(
    assignment_id: int,
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(require_roles(Role.ADMIN)),
):
    approvers.remove_department_approver(uow, actor, assignment_id)
