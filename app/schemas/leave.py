"""
Leave schemas
"""
from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from app.models.employee import Department
from app.models.leave import LeaveType, LeaveStatus
from app.schemas.employee import EmployeeRef
from app.utils.datetime_utils import iso_utc


class LeaveApplyRequest(BaseModel):
    """Schema for filing a leave request"""
    leave_type: LeaveType = Field(..., description="Type of leave")
    start_date: date = Field(..., description="First day of leave")
    end_date: date = Field(..., description="Last day of leave (inclusive)")
    reason: str = Field(..., description="Reason for leave")
    department: Optional[Department] = Field(None, description="Department to file under (defaults to own)")
    approver_id: Optional[int] = Field(None, description="Preferred approver")
    employee_id: Optional[int] = Field(None, description="File on behalf of this employee (HR/admin only)")


class ApprovalActionRequest(BaseModel):
    """Schema for leave approval; remarks are required for LWOP requests"""
    remarks: Optional[str] = Field(None, description="Approver remarks")


class RejectActionRequest(BaseModel):
    """Schema for leave rejection"""
    remarks: Optional[str] = Field(None, description="Rejection remarks")


class LeaveOut(BaseModel):
    """Schema for leave request output"""
    id: int
    employee_id: int
    employee: Optional[EmployeeRef] = None
    leave_type: LeaveType
    department: Department
    start_date: date
    end_date: date
    total_days: int
    reason: str
    status: LeaveStatus
    is_lwop: bool
    approver_id: Optional[int] = Field(None, description="Preferred approver, then whoever acted on the request")
    approver: Optional[EmployeeRef] = None
    approver_remarks: Optional[str] = None
    approved_at: Optional[datetime] = Field(None, description="When the request was approved or rejected")
    filed_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("approved_at", "filed_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt: Optional[datetime]) -> Optional[str]:
        return iso_utc(dt)


class DashboardStats(BaseModel):
    pending: int
    approved: int
    rejected: int
    total: int


class DashboardOut(BaseModel):
    """Own request counts and most recent requests"""
    stats: DashboardStats
    recent_requests: List[LeaveOut]
