"""
Repository interfaces the leave engine depends on.

Services only see these abstract classes, bundled in a UnitOfWork. Repositories
flush within the unit of work and never commit; the UnitOfWork owns the
transaction, so a failed guard or a lost update rolls back every write of the
operation together.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set

from app.models.audit_log import LeaveAuditLog
from app.models.department_approver import DepartmentApprover
from app.models.employee import Department, Employee
from app.models.leave import LeaveRequest, PtoBalance


class EmployeeRepository(ABC):
    @abstractmethod
    def get(self, employee_id: int) -> Optional[Employee]:
        ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Employee]:
        ...

    @abstractmethod
    def get_by_emp_code(self, emp_code: str) -> Optional[Employee]:
        ...

    @abstractmethod
    def add(self, employee: Employee) -> Employee:
        ...

    @abstractmethod
    def save(self, employee: Employee) -> Employee:
        ...

    @abstractmethod
    def list_all(self) -> List[Employee]:
        ...


class BalanceRepository(ABC):
    @abstractmethod
    def get(self, employee_id: int, year: int, for_update: bool = False) -> Optional[PtoBalance]:
        """Fetch the balance; for_update locks the row where the database supports it."""

    @abstractmethod
    def add(self, balance: PtoBalance) -> PtoBalance:
        """Insert a new balance. Raises AlreadyExists on a duplicate employee/year."""

    @abstractmethod
    def save(self, balance: PtoBalance) -> PtoBalance:
        """Persist changes. Raises Conflict if the row changed since it was read."""

    @abstractmethod
    def list_for_year(self, year: int) -> List[PtoBalance]:
        ...


class LeaveRequestRepository(ABC):
    @abstractmethod
    def get(self, leave_request_id: int) -> Optional[LeaveRequest]:
        ...

    @abstractmethod
    def add(self, leave_request: LeaveRequest) -> LeaveRequest:
        ...

    @abstractmethod
    def save(self, leave_request: LeaveRequest) -> LeaveRequest:
        """Persist changes. Raises Conflict if the row changed since it was read."""

    @abstractmethod
    def list_by_employee(self, employee_id: int) -> List[LeaveRequest]:
        ...

    @abstractmethod
    def list_pending(self, departments: Optional[Iterable[Department]] = None) -> List[LeaveRequest]:
        """Pending requests, newest first; departments=None means every department."""

    @abstractmethod
    def list_all(self) -> List[LeaveRequest]:
        ...


class AuditLogRepository(ABC):
    @abstractmethod
    def append(self, entry: LeaveAuditLog) -> LeaveAuditLog:
        ...

    @abstractmethod
    def list(self, leave_request_id: Optional[int] = None, limit: int = 100) -> List[LeaveAuditLog]:
        ...


class ApproverRepository(ABC):
    @abstractmethod
    def get(self, assignment_id: int) -> Optional[DepartmentApprover]:
        ...

    @abstractmethod
    def find(self, department: Department, approver_id: int) -> Optional[DepartmentApprover]:
        ...

    @abstractmethod
    def departments_for(self, approver_id: int) -> Set[Department]:
        ...

    @abstractmethod
    def list(self, department: Optional[Department] = None) -> List[DepartmentApprover]:
        ...

    @abstractmethod
    def add(self, assignment: DepartmentApprover) -> DepartmentApprover:
        ...

    @abstractmethod
    def remove(self, assignment: DepartmentApprover) -> None:
        ...


class UnitOfWork(ABC):
    """
    Transaction scope for one engine operation.

    Usage:
        with uow:
            ...
            uow.commit()

    Leaving the block through an exception rolls back.
    """

    employees: EmployeeRepository
    balances: BalanceRepository
    leave_requests: LeaveRequestRepository
    audit_logs: AuditLogRepository
    approvers: ApproverRepository

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Commit all pending writes. Raises Conflict on a lost update."""

    @abstractmethod
    def rollback(self) -> None:
        ...
