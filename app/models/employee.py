"""
Employee model
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from app.db.base import Base


class Role(str, enum.Enum):
    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR = "hr"
    ADMIN = "admin"
    TOP_MANAGEMENT = "top_management"


class Department(str, enum.Enum):
    HUMAN_RESOURCES = "human_resources"
    IT_DIGITAL_TRANSFORMATION = "it_digital_transformation"
    ACCOUNTING = "accounting"
    CREDIT_COLLECTION = "credit_collection"
    SALES = "sales"
    BUSINESS_UNIT = "business_unit"
    BUSINESS_SUPPORT_GROUP = "business_support_group"
    OPERATIONS_LOGISTICS = "operations_logistics"
    OPERATIONS_FRONTLINE = "operations_frontline"
    OPERATIONS_WAREHOUSE = "operations_warehouse"
    TOP_MANAGEMENT = "top_management"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    emp_code = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    position = Column(String, nullable=False, default="")
    department = Column(SQLEnum(Department), nullable=False, index=True)
    role = Column(SQLEnum(Role), nullable=False, default=Role.EMPLOYEE)
    password_hash = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)

    # Relationships
    balances = relationship("PtoBalance", back_populates="employee", cascade="all, delete-orphan")
    approver_assignments = relationship(
        "DepartmentApprover", back_populates="approver", cascade="all, delete-orphan"
    )
    leave_requests = relationship("LeaveRequest", foreign_keys="LeaveRequest.employee_id", back_populates="employee")
    approved_leave_requests = relationship(
        "LeaveRequest", foreign_keys="LeaveRequest.approver_id", back_populates="approver"
    )
