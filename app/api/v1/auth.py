"""
Authentication endpoints
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from app.core.deps import get_uow, get_current_user
from app.core.security import verify_password, create_access_token
from app.models.employee import Employee
from app.repositories.base import UnitOfWork
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.employee import EmployeeRegister, EmployeeOut
from app.services.employee_service import register_employee

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=EmployeeOut, status_code=201)
async def register(
    data: EmployeeRegister,
    uow: UnitOfWork = Depends(get_uow),
):
    """
    Self-register as an employee

    New accounts always get the employee role and a PTO balance for the
    current year.
    """
    return register_employee(uow, data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    uow: UnitOfWork = Depends(get_uow),
):
    """
    Authenticate user and return JWT token

    Validates emp_code and password, rejects inactive employees.
    """
    employee = uow.employees.get_by_emp_code(login_data.emp_code.strip())

    if not employee:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid employee code or password"
        )

    # Check if employee is active
    if not employee.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    if employee.password_hash is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No password set for this account"
        )

    if not verify_password(login_data.password, employee.password_hash):
        logger.info("login failed: emp_code=%s", login_data.emp_code)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid employee code or password"
        )

    # Note: JWT 'sub' claim must be a string per RFC 7519
    token_data = {
        "sub": str(employee.id),
        "emp_code": employee.emp_code,
        "role": employee.role.value,
    }
    access_token = create_access_token(data=token_data)

    logger.info("login succeeded: employee_id=%s", employee.id)
    return TokenResponse(access_token=access_token, employee_id=employee.id, role=employee.role)


@router.get("/me", response_model=EmployeeOut)
async def me(current_user: Employee = Depends(get_current_user)):
    """Current authenticated user's profile"""
    return current_user
