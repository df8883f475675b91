"""
PTO balance endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from app.core.deps import get_uow, get_current_actor
from app.core.identity import Actor
from app.repositories.base import UnitOfWork
from app.schemas.balance import BalanceOut
from app.services.employee_service import get_employee_balance

router = APIRouter()


@router.get("/me", response_model=BalanceOut)
async def my_balance_endpoint(
    year: Optional[int] = Query(None, description="Calendar year (defaults to current year)"),
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(get_current_actor),
):
    """Current user's PTO balance"""
    return get_employee_balance(uow, actor, actor.id, year)


@router.get("/{employee_id}", response_model=BalanceOut)
async def employee_balance_endpoint(
    employee_id: int,
    year: Optional[int] = Query(None, description="Calendar year (defaults to current year)"),
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(get_current_actor),
):
    """PTO balance of an employee (self, HR, ADMIN, TOP_MANAGEMENT)"""
    return get_employee_balance(uow, actor, employee_id, year)
