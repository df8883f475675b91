"""
Leave models
"""
from sqlalchemy import (
    Column,
    Integer,
    Date,
    DateTime,
    ForeignKey,
    Text,
    Enum as SQLEnum,
    Boolean,
    UniqueConstraint,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import text
import enum
from app.db.base import Base
from app.models.employee import Department


class LeaveType(str, enum.Enum):
    VACATION = "vacation"
    SICK = "sick"
    EMERGENCY = "emergency"
    BEREAVEMENT = "bereavement"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    INDEFINITE = "indefinite"


class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"  # Reserved; no workflow transition reaches it


class PtoBalance(Base):
    """
    PTO credits: one row per (employee_id, year).
    remaining = total_credits - used_credits.
    """
    __tablename__ = "pto_balances"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False, index=True)
    total_credits = Column(Integer, nullable=False, default=5)
    used_credits = Column(Integer, nullable=False, default=0)
    lwop_days = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=1)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    employee = relationship("Employee", back_populates="balances")

    # Writes are compare-and-swap on version; a stale write raises StaleDataError at flush
    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("employee_id", "year", name="uq_pto_balances_employee_year"),
        CheckConstraint("used_credits >= 0", name="check_used_credits_non_negative"),
        CheckConstraint("lwop_days >= 0", name="check_lwop_days_non_negative"),
        CheckConstraint("used_credits <= total_credits", name="check_used_le_total"),
    )


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    leave_type = Column(SQLEnum(LeaveType), nullable=False)
    department = Column(SQLEnum(Department), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_days = Column(Integer, nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(SQLEnum(LeaveStatus), nullable=False, default=LeaveStatus.PENDING, index=True)
    is_lwop = Column(Boolean, nullable=False, default=False)
    approver_id = Column(Integer, ForeignKey("employees.id"), nullable=True, index=True)
    approver_remarks = Column(Text, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    filed_at = Column(DateTime(timezone=True), nullable=False)
    version = Column(Integer, nullable=False, default=1)

    # Relationships
    employee = relationship("Employee", foreign_keys=[employee_id], back_populates="leave_requests")
    approver = relationship("Employee", foreign_keys=[approver_id], back_populates="approved_leave_requests")
    audit_logs = relationship("LeaveAuditLog", back_populates="leave_request", order_by="LeaveAuditLog.id")

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_leave_requests_employee_dates", "employee_id", "start_date", "end_date"),
        CheckConstraint("start_date <= end_date", name="check_start_date_le_end_date"),
    )
