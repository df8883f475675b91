"""
Report service - leave summary for HR, admins and top management, and the
executive dashboard for top management
"""
from collections import defaultdict
from typing import Dict, Optional

from app.core.exceptions import Forbidden
from app.core.identity import Actor
from app.models.employee import Role
from app.models.leave import LeaveStatus
from app.repositories.base import UnitOfWork
from app.utils.datetime_utils import now_utc

REPORT_VIEWER_ROLES = frozenset({Role.HR, Role.ADMIN, Role.TOP_MANAGEMENT})
EXECUTIVE_ROLES = frozenset({Role.ADMIN, Role.TOP_MANAGEMENT})


def build_summary_report(uow: UnitOfWork, actor: Actor, year: Optional[int] = None) -> Dict:
    """
    Aggregate leave usage

    Args:
        uow: Unit of work
        actor: Must be HR, ADMIN or TOP_MANAGEMENT
        year: Balance year for the PTO/LWOP totals (defaults to the current year)

    Returns:
        Dictionary with:
        - by_department: approved requests per department (count, lwop_count)
        - by_type: approved requests per leave type
        - by_status: request count per status
        - total_pto_used / total_lwop_days: summed over the year's balances
    """
    if actor.role not in REPORT_VIEWER_ROLES:
        raise Forbidden("Only HR, admins and top management can view reports")

    year = year or now_utc().year

    by_department = defaultdict(lambda: {"count": 0, "lwop_count": 0})
    by_type = defaultdict(int)
    by_status = {s.value: 0 for s in LeaveStatus}

    for leave_request in uow.leave_requests.list_all():
        by_status[leave_request.status.value] += 1
        if leave_request.status != LeaveStatus.APPROVED:
            continue
        department = by_department[leave_request.department.value]
        department["count"] += 1
        if leave_request.is_lwop:
            department["lwop_count"] += 1
        by_type[leave_request.leave_type.value] += 1

    balances = uow.balances.list_for_year(year)

    return {
        "year": year,
        "by_department": [
            {"department": name, "count": stats["count"], "lwop_count": stats["lwop_count"]}
            for name, stats in sorted(by_department.items())
        ],
        "by_type": [
            {"leave_type": name, "count": count}
            for name, count in sorted(by_type.items())
        ],
        "by_status": by_status,
        "total_pto_used": sum(b.used_credits for b in balances),
        "total_lwop_days": sum(b.lwop_days for b in balances),
    }


def _percent(part: int, whole: int) -> float:
    return round(part * 100 / whole, 2) if whole > 0 else 0.0


def build_executive_dashboard(uow: UnitOfWork, actor: Actor, year: Optional[int] = None) -> Dict:
    """
    Company-wide leave health for top management

    Active employees are counted against their balance for the year; an
    employee without one contributes no credits.

    Returns:
        Dictionary with:
        - overview: total_employees, active_leaves (approved and not yet
          ended), pending_approvals, pto_utilization (% of allotted credits
          used), lwop_rate (% of leave days taken unpaid)
        - department_health: employees, pto_used, lwop_days per department
    """
    if actor.role not in EXECUTIVE_ROLES:
        raise Forbidden("Only top management and admins can view the executive dashboard")

    today = now_utc().date()
    year = year or today.year

    employees = [e for e in uow.employees.list_all() if e.active]
    balances = {b.employee_id: b for b in uow.balances.list_for_year(year)}

    total_credits = used_credits = lwop_days = 0
    department_health = defaultdict(lambda: {"employees": 0, "pto_used": 0, "lwop_days": 0})
    for employee in employees:
        health = department_health[employee.department.value]
        health["employees"] += 1
        balance = balances.get(employee.id)
        if balance is None:
            continue
        total_credits += balance.total_credits
        used_credits += balance.used_credits
        lwop_days += balance.lwop_days
        health["pto_used"] += balance.used_credits
        health["lwop_days"] += balance.lwop_days

    requests = uow.leave_requests.list_all()
    active_leaves = sum(
        1 for r in requests if r.status == LeaveStatus.APPROVED and r.end_date >= today
    )
    pending_approvals = sum(1 for r in requests if r.status == LeaveStatus.PENDING)

    return {
        "year": year,
        "overview": {
            "total_employees": len(employees),
            "active_leaves": active_leaves,
            "pending_approvals": pending_approvals,
            "pto_utilization": _percent(used_credits, total_credits),
            "lwop_rate": _percent(lwop_days, used_credits + lwop_days),
        },
        "department_health": [
            {"department": name, **stats}
            for name, stats in sorted(department_health.items())
        ],
    }
