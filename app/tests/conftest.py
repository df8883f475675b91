"""
Pytest configuration and fixtures
"""
import os

# Settings are read at import time; provide test values before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-leave-tracker-tests")
os.environ.setdefault("APP_ENV", "local")

from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.core.deps import get_db
from app.core.security import create_access_token, hash_password
from app.models import Employee, Role, Department, PtoBalance, DepartmentApprover
from app.repositories.sql import SqlAlchemyUnitOfWork
from app.utils.datetime_utils import now_utc

# Year used for balances and leave dates in tests
YEAR = now_utc().year

# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def uow(db):
    return SqlAlchemyUnitOfWork(db)


@pytest.fixture
def make_employee(db):
    """
    Factory creating an employee with a PTO balance for YEAR

    Usage:
        emp = make_employee("EMP001", department=Department.SALES, used_credits=3)
    """
    def _make(
        emp_code: str,
        role: Role = Role.EMPLOYEE,
        department: Department = Department.SALES,
        password: str = "password123",
        total_credits: Optional[int] = 5,
        used_credits: int = 0,
        active: bool = True,
    ) -> Employee:
        employee = Employee(
            emp_code=emp_code,
            email=f"{emp_code.lower()}@example.com",
            name=f"Employee {emp_code}",
            position="Staff",
            department=department,
            role=role,
            password_hash=hash_password(password),
            active=active,
        )
        db.add(employee)
        db.flush()
        if total_credits is not None:
            db.add(PtoBalance(
                employee_id=employee.id,
                year=YEAR,
                total_credits=total_credits,
                used_credits=used_credits,
                lwop_days=0,
            ))
        db.commit()
        db.refresh(employee)
        return employee

    return _make


@pytest.fixture
def assign_approver(db):
    """Factory designating an employee as approver for a department"""
    def _assign(employee: Employee, department: Department) -> DepartmentApprover:
        assignment = DepartmentApprover(department=department, approver_id=employee.id)
        db.add(assignment)
        db.commit()
        db.refresh(assignment)
        return assignment

    return _assign


@pytest.fixture
def auth_headers():
    """Factory building bearer headers for an employee"""
    def _headers(employee: Employee) -> dict:
        token = create_access_token({"sub": str(employee.id), "emp_code": employee.emp_code})
        return {"Authorization": f"Bearer {token}"}

    return _headers
