"""
Authentication schemas
"""
from pydantic import BaseModel, Field
from app.models.employee import Role


class LoginRequest(BaseModel):
    """Login request schema"""
    emp_code: str = Field(..., description="Employee code")
    password: str = Field(..., description="Password")


class TokenResponse(BaseModel):
    """Token response schema; employee_id and role save clients a /auth/me round trip"""
    access_token: str
    token_type: str = "bearer"
    employee_id: int
    role: Role
