"""
Report schemas
"""
from typing import Dict, List
from pydantic import BaseModel


class DepartmentLeaveStats(BaseModel):
    department: str
    count: int
    lwop_count: int


class LeaveTypeStats(BaseModel):
    leave_type: str
    count: int


class SummaryReportOut(BaseModel):
    """Approved leave usage by department and type, plus balance totals"""
    year: int
    by_department: List[DepartmentLeaveStats]
    by_type: List[LeaveTypeStats]
    by_status: Dict[str, int]
    total_pto_used: int
    total_lwop_days: int


class ExecutiveOverview(BaseModel):
    total_employees: int
    active_leaves: int
    pending_approvals: int
    pto_utilization: float
    lwop_rate: float


class DepartmentHealth(BaseModel):
    department: str
    employees: int
    pto_used: int
    lwop_days: int


class ExecutiveDashboardOut(BaseModel):
    """Company-wide overview and per-department PTO/LWOP usage"""
    year: int
    overview: ExecutiveOverview
    department_health: List[DepartmentHealth]
