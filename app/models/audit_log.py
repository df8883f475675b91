"""
Leave audit log model (append-only)
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.models.leave import LeaveStatus


class LeaveAuditLog(Base):
    __tablename__ = "leave_audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    leave_request_id = Column(Integer, ForeignKey("leave_requests.id"), nullable=False, index=True)
    actor_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    action = Column(String, nullable=False)  # e.g. "Filed leave request"
    previous_status = Column(SQLEnum(LeaveStatus), nullable=True)
    new_status = Column(SQLEnum(LeaveStatus), nullable=True)
    remarks = Column(Text, nullable=True)
    pto_deducted = Column(Integer, nullable=True)
    is_lwop = Column(Boolean, nullable=False, default=False)
    # Set explicitly on insert; SQLite server defaults lose the timezone
    created_at = Column(DateTime(timezone=True), nullable=False)

    leave_request = relationship("LeaveRequest", back_populates="audit_logs")
    actor = relationship("Employee")
