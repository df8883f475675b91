"""
Employee schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict
from app.models.employee import Role, Department
from app.schemas.balance import BalanceOut
from app.utils.datetime_utils import iso_utc


class EmployeeRegister(BaseModel):
    """Schema for self-registration"""
    emp_code: str = Field(..., min_length=1, description="Employee code (unique)")
    email: str = Field(..., description="Work email (unique)")
    name: str = Field(..., min_length=1, description="Employee name")
    position: str = Field("", description="Job title")
    department: Department = Field(..., description="Home department")
    password: str = Field(..., max_length=72, description="Password (min 8 characters)")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("Invalid email address")
        return v


class EmployeeRoleUpdate(BaseModel):
    """Schema for changing an employee's role"""
    role: Role = Field(..., description="New role")


class EmployeeOut(BaseModel):
    """Schema for employee output"""
    id: int
    emp_code: str
    email: str
    name: str
    position: str
    department: Department
    role: Role
    active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return iso_utc(dt)


class EmployeeRef(BaseModel):
    """Minimal employee reference embedded in leave responses"""
    id: int
    emp_code: str
    name: str
    department: Department

    model_config = ConfigDict(from_attributes=True)


class EmployeeWithBalanceOut(BaseModel):
    """Employee plus their balance for the requested year"""
    employee: EmployeeOut
    balance: Optional[BalanceOut] = None

    model_config = ConfigDict(from_attributes=True)
