"""
Database models
"""
from app.models.employee import Employee, Role, Department
from app.models.leave import LeaveRequest, LeaveType, LeaveStatus, PtoBalance
from app.models.department_approver import DepartmentApprover
from app.models.audit_log import LeaveAuditLog

__all__ = [
    "Employee",
    "Role",
    "Department",
    "LeaveRequest",
    "LeaveType",
    "LeaveStatus",
    "PtoBalance",
    "DepartmentApprover",
    "LeaveAuditLog",
]
