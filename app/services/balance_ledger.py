"""
Balance ledger - PTO allotment, consumption and LWOP accrual per employee/year.

- remaining = total_credits - used_credits (never negative).
- Balances are opened at onboarding or on the first request for a year,
  and mutated only on leave approval.
- On APPROVE: PTO covers what it can; for LWOP requests the excess becomes unpaid days.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from app.core.exceptions import Conflict, NotFound, ValidationError, AlreadyExists
from app.models.leave import PtoBalance
from app.repositories.base import UnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_TOTAL_CREDITS = 5


@dataclass(frozen=True)
class Deduction:
    """How an approved request was paid for."""

    pto_days: int
    lwop_days: int

    @property
    def total_days(self) -> int:
        return self.pto_days + self.lwop_days


def remaining(balance: PtoBalance) -> int:
    """PTO days still available on the balance."""
    return max(0, balance.total_credits - balance.used_credits)


def predict_lwop(balance: PtoBalance, requested_days: int) -> bool:
    """True if the request cannot be fully covered by remaining PTO."""
    return requested_days > remaining(balance)


def apply_deduction(balance: PtoBalance, requested_days: int, is_lwop: bool) -> Deduction:
    """
    Deduct an approved request from the balance (in place) and return the split.

    Pure accounting: no authorization, no persistence. The caller has already
    established that the request is approvable.

    Args:
        balance: Balance to mutate
        requested_days: Total days of the request
        is_lwop: Whether the request is treated as LWOP

    Returns:
        Deduction with PTO and LWOP portions

    Raises:
        ValidationError: If requested_days is negative
        Conflict: If a non-LWOP request no longer fits the remaining credits
    """
    if requested_days < 0:
        raise ValidationError("Requested days cannot be negative")

    available = remaining(balance)

    if is_lwop:
        pto_days = min(available, requested_days)
        lwop_days = requested_days - pto_days
    else:
        if requested_days > available:
            raise Conflict(
                f"Balance has {available} PTO day(s) left but the request needs {requested_days}",
                details={"remaining": available, "requested_days": requested_days},
            )
        pto_days = requested_days
        lwop_days = 0

    balance.used_credits += pto_days
    balance.lwop_days += lwop_days

    logger.debug(
        "deduction applied: balance_id=%s pto=%s lwop=%s used=%s/%s",
        balance.id, pto_days, lwop_days, balance.used_credits, balance.total_credits,
    )
    return Deduction(pto_days=pto_days, lwop_days=lwop_days)


def initialize_balance(
    uow: UnitOfWork,
    employee_id: int,
    year: int,
    total_credits: Optional[int] = None,
) -> PtoBalance:
    """
    Create the yearly balance for an employee with zero usage.

    Raises:
        AlreadyExists: If a balance for employee/year already exists
    """
    if uow.balances.get(employee_id, year) is not None:
        raise AlreadyExists(f"PTO balance for employee {employee_id} and year {year} already exists")

    balance = PtoBalance(
        employee_id=employee_id,
        year=year,
        total_credits=DEFAULT_TOTAL_CREDITS if total_credits is None else total_credits,
        used_credits=0,
        lwop_days=0,
    )
    uow.balances.add(balance)
    logger.info("PTO balance initialized: employee_id=%s year=%s total=%s", employee_id, year, balance.total_credits)
    return balance


def get_balance(uow: UnitOfWork, employee_id: int, year: int) -> PtoBalance:
    """Raises NotFound if the employee has no balance for the year."""
    balance = uow.balances.get(employee_id, year)
    if balance is None:
        raise NotFound(f"No PTO balance for employee {employee_id} in year {year}")
    return balance


def get_or_open_balance(
    uow: UnitOfWork,
    employee_id: int,
    year: int,
    total_credits: Optional[int] = None,
) -> PtoBalance:
    """
    Balance for the employee/year, opened with the default allotment on first use.

    Filing leave for a year nobody has booked yet (January leave filed in
    December, or the first request after the year rolls over) opens that
    year's balance inside the caller's unit of work.
    """
    balance = uow.balances.get(employee_id, year)
    if balance is not None:
        return balance
    return initialize_balance(uow, employee_id, year, total_credits)
