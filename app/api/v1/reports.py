"""
Report endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from app.core.deps import get_uow, require_roles
from app.core.identity import Actor
from app.models.employee import Role
from app.repositories.base import UnitOfWork
from app.schemas.report import ExecutiveDashboardOut, SummaryReportOut
from app.services.report_service import build_executive_dashboard, build_summary_report

router = APIRouter()


@router.get("/summary", response_model=SummaryReportOut)
async def summary_report_endpoint(
    year: Optional[int] = Query(None, description="Balance year (defaults to current year)"),
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(require_roles(Role.HR, Role.TOP_MANAGEMENT)),
):
    """
    Leave summary (HR, ADMIN, TOP_MANAGEMENT)

    Approved leaves by department and type, request totals by status,
    and PTO/LWOP totals across the year's balances.
    """
    return build_summary_report(uow, actor, year)


@router.get("/executive", response_model=ExecutiveDashboardOut)
async def executive_dashboard_endpoint(
    year: Optional[int] = Query(None, description="Balance year (defaults to current year)"),
    uow: UnitOfWork = Depends(get_uow),
    actor: Actor = Depends(require_roles(Role.TOP_MANAGEMENT)),
):
    """
    Executive dashboard (TOP_MANAGEMENT, ADMIN)

    Headcount, leaves in progress, pending approvals, PTO utilization and
    LWOP rate, plus PTO/LWOP usage per department.
    """
    return build_executive_dashboard(uow, actor, year)
