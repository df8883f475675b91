"""
Department approver schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from app.models.employee import Department
from app.schemas.employee import EmployeeRef
from app.utils.datetime_utils import iso_utc


class DepartmentApproverRequest(BaseModel):
    """Assign an approver to a department"""
    department: Department = Field(..., description="Department")
    approver_id: int = Field(..., description="Employee ID of the approver")


class DepartmentApproverOut(BaseModel):
    """Schema for department approver output"""
    id: int
    department: Department
    approver_id: int
    approver: Optional[EmployeeRef] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return iso_utc(dt)
