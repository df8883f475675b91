"""
SQLAlchemy implementations of the leave engine repositories
"""
import logging
from typing import Iterable, List, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import AlreadyExists, Conflict
from app.models.audit_log import LeaveAuditLog
from app.models.department_approver import DepartmentApprover
from app.models.employee import Department, Employee
from app.models.leave import LeaveRequest, LeaveStatus, PtoBalance
from app.repositories.base import (
    ApproverRepository,
    AuditLogRepository,
    BalanceRepository,
    EmployeeRepository,
    LeaveRequestRepository,
    UnitOfWork,
)

logger = logging.getLogger(__name__)


def _flush(session: Session, entity_type: str, entity_id) -> None:
    """Flush pending changes, turning a failed version check into Conflict."""
    try:
        session.flush()
    except StaleDataError:
        logger.warning("lost update detected: entity=%s id=%s", entity_type, entity_id)
        raise Conflict(
            f"{entity_type} {entity_id} was modified by another transaction; reload and retry",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )


class SqlAlchemyEmployeeRepository(EmployeeRepository):
    def __init__(self, session: Session):
        self.session = session

    def get(self, employee_id: int) -> Optional[Employee]:
        return self.session.query(Employee).filter(Employee.id == employee_id).first()

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self.session.query(Employee).filter(Employee.email == email).first()

    def get_by_emp_code(self, emp_code: str) -> Optional[Employee]:
        return self.session.query(Employee).filter(Employee.emp_code == emp_code).first()

    def add(self, employee: Employee) -> Employee:
        self.session.add(employee)
        try:
            self.session.flush()
        except IntegrityError:
            raise AlreadyExists("Employee with this email or employee code already exists")
        return employee

    def save(self, employee: Employee) -> Employee:
        self.session.flush()
        return employee

    def list_all(self) -> List[Employee]:
        return (
            self.session.query(Employee)
            .options(joinedload(Employee.balances))
            .order_by(Employee.name)
            .all()
        )


class SqlAlchemyBalanceRepository(BalanceRepository):
    def __init__(self, session: Session):
        self.session = session

    def get(self, employee_id: int, year: int, for_update: bool = False) -> Optional[PtoBalance]:
        query = self.session.query(PtoBalance).filter(
            PtoBalance.employee_id == employee_id,
            PtoBalance.year == year,
        )
        if for_update:
            query = query.with_for_update()  # Row-level lock (no-op on SQLite)
        return query.first()

    def add(self, balance: PtoBalance) -> PtoBalance:
        self.session.add(balance)
        try:
            self.session.flush()
        except IntegrityError:
            raise AlreadyExists(
                f"PTO balance for employee {balance.employee_id} and year {balance.year} already exists"
            )
        return balance

    def save(self, balance: PtoBalance) -> PtoBalance:
        _flush(self.session, "pto_balance", balance.id)
        return balance

    def list_for_year(self, year: int) -> List[PtoBalance]:
        return self.session.query(PtoBalance).filter(PtoBalance.year == year).all()


class SqlAlchemyLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, session: Session):
        self.session = session

    def _query(self):
        return self.session.query(LeaveRequest).options(
            joinedload(LeaveRequest.employee),
            joinedload(LeaveRequest.approver),
        )

    def get(self, leave_request_id: int) -> Optional[LeaveRequest]:
        return self._query().filter(LeaveRequest.id == leave_request_id).first()

    def add(self, leave_request: LeaveRequest) -> LeaveRequest:
        self.session.add(leave_request)
        self.session.flush()
        return leave_request

    def save(self, leave_request: LeaveRequest) -> LeaveRequest:
        _flush(self.session, "leave_request", leave_request.id)
        return leave_request

    def list_by_employee(self, employee_id: int) -> List[LeaveRequest]:
        return (
            self._query()
            .filter(LeaveRequest.employee_id == employee_id)
            .order_by(LeaveRequest.filed_at.desc(), LeaveRequest.id.desc())
            .all()
        )

    def list_pending(self, departments: Optional[Iterable[Department]] = None) -> List[LeaveRequest]:
        query = self._query().filter(LeaveRequest.status == LeaveStatus.PENDING)
        if departments is not None:
            departments = list(departments)
            if not departments:
                return []
            query = query.filter(LeaveRequest.department.in_(departments))
        return query.order_by(LeaveRequest.filed_at.desc(), LeaveRequest.id.desc()).all()

    def list_all(self) -> List[LeaveRequest]:
        return self._query().order_by(LeaveRequest.filed_at.desc(), LeaveRequest.id.desc()).all()


class SqlAlchemyAuditLogRepository(AuditLogRepository):
    def __init__(self, session: Session):
        self.session = session

    def append(self, entry: LeaveAuditLog) -> LeaveAuditLog:
        self.session.add(entry)
        self.session.flush()
        return entry

    def list(self, leave_request_id: Optional[int] = None, limit: int = 100) -> List[LeaveAuditLog]:
        query = self.session.query(LeaveAuditLog)
        if leave_request_id is not None:
            query = query.filter(LeaveAuditLog.leave_request_id == leave_request_id)
        return query.order_by(LeaveAuditLog.created_at.desc(), LeaveAuditLog.id.desc()).limit(limit).all()


class SqlAlchemyApproverRepository(ApproverRepository):
    def __init__(self, session: Session):
        self.session = session

    def get(self, assignment_id: int) -> Optional[DepartmentApprover]:
        return self.session.query(DepartmentApprover).filter(DepartmentApprover.id == assignment_id).first()

    def find(self, department: Department, approver_id: int) -> Optional[DepartmentApprover]:
        return self.session.query(DepartmentApprover).filter(
            DepartmentApprover.department == department,
            DepartmentApprover.approver_id == approver_id,
        ).first()

    def departments_for(self, approver_id: int) -> Set[Department]:
        rows = self.session.query(DepartmentApprover.department).filter(
            DepartmentApprover.approver_id == approver_id
        ).all()
        return {department for (department,) in rows}

    def list(self, department: Optional[Department] = None) -> List[DepartmentApprover]:
        query = self.session.query(DepartmentApprover).options(joinedload(DepartmentApprover.approver))
        if department is not None:
            query = query.filter(DepartmentApprover.department == department)
        return query.order_by(DepartmentApprover.department, DepartmentApprover.id).all()

    def add(self, assignment: DepartmentApprover) -> DepartmentApprover:
        self.session.add(assignment)
        try:
            self.session.flush()
        except IntegrityError:
            raise AlreadyExists(
                f"Employee {assignment.approver_id} is already an approver for {assignment.department.value}"
            )
        return assignment

    def remove(self, assignment: DepartmentApprover) -> None:
        self.session.delete(assignment)
        self.session.flush()


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Unit of work over a caller-owned Session (e.g. the request-scoped get_db session)."""

    def __init__(self, session: Session):
        self.session = session
        self.employees = SqlAlchemyEmployeeRepository(session)
        self.balances = SqlAlchemyBalanceRepository(session)
        self.leave_requests = SqlAlchemyLeaveRequestRepository(session)
        self.audit_logs = SqlAlchemyAuditLogRepository(session)
        self.approvers = SqlAlchemyApproverRepository(session)

    def commit(self) -> None:
        try:
            self.session.commit()
        except StaleDataError:
            self.session.rollback()
            raise Conflict("Record was modified by another transaction; reload and retry")

    def rollback(self) -> None:
        self.session.rollback()
