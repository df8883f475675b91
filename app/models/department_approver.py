"""
Department approver assignment model
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum, text
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.models.employee import Department


class DepartmentApprover(Base):
    __tablename__ = "department_approvers"

    id = Column(Integer, primary_key=True, index=True)
    department = Column(SQLEnum(Department), nullable=False, index=True)
    approver_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("department", "approver_id", name="uq_department_approver"),
    )

    # Relationships
    approver = relationship("Employee", back_populates="approver_assignments")
