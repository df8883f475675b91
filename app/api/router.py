"""
Main API router
"""
from fastapi import APIRouter

from app.api.v1 import (
    health,
    version,
    auth,
    leaves,
    balances,
    department_approvers,
    employees,
    audit_logs,
    reports,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(leaves.router, prefix="/leaves", tags=["leaves"])
api_router.include_router(balances.router, prefix="/balances", tags=["balances"])
api_router.include_router(
    department_approvers.router, prefix="/department-approvers", tags=["department-approvers"]
)
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit-logs"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
