"""
Tests for the leave request lifecycle (file, approve, reject)
"""
from datetime import date

import pytest
from sqlalchemy import text

from app.core.exceptions import Conflict, Forbidden, InvalidState, NotFound, ValidationError
from app.core.identity import Actor
from app.models.employee import Department, Role
from app.models.leave import LeaveStatus, LeaveType
from app.repositories.sql import SqlAlchemyBalanceRepository
from app.services import leave_service
from app.services.authorization import ApprovalPolicy
from app.utils.datetime_utils import now_utc

YEAR = now_utc().year
POLICY = ApprovalPolicy()


def _file(uow, employee, days, leave_type=LeaveType.VACATION, **kwargs):
    start = date(YEAR, 3, 2)
    end = date(YEAR, 3, 1 + days)
    return leave_service.file_leave_request(
        uow,
        kwargs.pop("actor", Actor.from_employee(employee)),
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        reason=kwargs.pop("reason", "Family trip out of town"),
        policy=kwargs.pop("policy", POLICY),
        **kwargs,
    )


@pytest.fixture
def hr(make_employee):
    return make_employee("HR001", role=Role.HR, department=Department.HUMAN_RESOURCES)


@pytest.fixture
def sales_manager(make_employee, assign_approver):
    manager = make_employee("MGR001", role=Role.MANAGER, department=Department.OPERATIONS_LOGISTICS)
    assign_approver(manager, Department.SALES)
    return manager


def test_total_days_inclusive():
    assert leave_service.calculate_total_days(date(YEAR, 3, 2), date(YEAR, 3, 2)) == 1
    assert leave_service.calculate_total_days(date(YEAR, 3, 2), date(YEAR, 3, 6)) == 5


def test_file_within_remaining_is_not_lwop(uow, make_employee):
    employee = make_employee("EMP001")

    leave_request = _file(uow, employee, 3, leave_type=LeaveType.SICK)

    assert leave_request.status == LeaveStatus.PENDING
    assert leave_request.total_days == 3
    assert leave_request.is_lwop is False
    assert leave_request.department == Department.SALES

    logs = uow.audit_logs.list(leave_request_id=leave_request.id)
    assert len(logs) == 1
    assert logs[0].action == "Filed leave request"
    assert logs[0].previous_status is None
    assert logs[0].new_status == LeaveStatus.PENDING


def test_file_over_remaining_is_lwop(uow, make_employee):
    employee = make_employee("EMP001", used_credits=3)

    leave_request = _file(uow, employee, 5)

    assert leave_request.is_lwop is True
    # Filing never touches the balance
    assert uow.balances.get(employee.id, YEAR).used_credits == 3


def test_file_rejects_end_before_start(uow, make_employee):
    employee = make_employee("EMP001")

    with pytest.raises(ValidationError):
        leave_service.file_leave_request(
            uow, Actor.from_employee(employee), LeaveType.VACATION,
            date(YEAR, 3, 5), date(YEAR, 3, 4), "Family trip out of town", policy=POLICY,
        )


def test_file_rejects_cross_year(uow, make_employee):
    employee = make_employee("EMP001")

    with pytest.raises(ValidationError, match="span across years"):
        leave_service.file_leave_request(
            uow, Actor.from_employee(employee), LeaveType.VACATION,
            date(YEAR, 12, 30), date(YEAR + 1, 1, 2), "Holiday break with family", policy=POLICY,
        )


@pytest.mark.parametrize("reason", ["", "short", "   too short   "])
def test_file_rejects_short_reason(uow, make_employee, reason):
    employee = make_employee("EMP001")

    with pytest.raises(ValidationError, match="at least 10 characters"):
        _file(uow, employee, 1, reason=reason)
    assert uow.leave_requests.list_by_employee(employee.id) == []


def test_file_without_balance_opens_one(uow, make_employee):
    employee = make_employee("EMP001", total_credits=None)

    leave_request = _file(uow, employee, 2)

    assert leave_request.is_lwop is False
    balance = uow.balances.get(employee.id, YEAR)
    assert (balance.total_credits, balance.used_credits) == (5, 0)


def test_file_for_next_year_opens_balance(uow, make_employee, hr):
    employee = make_employee("EMP001", used_credits=5)

    leave_request = leave_service.file_leave_request(
        uow,
        Actor.from_employee(employee),
        leave_type=LeaveType.VACATION,
        start_date=date(YEAR + 1, 1, 5),
        end_date=date(YEAR + 1, 1, 6),
        reason="New year trip with family",
        policy=POLICY,
    )

    assert leave_request.is_lwop is False
    assert uow.balances.get(employee.id, YEAR).used_credits == 5
    opened = uow.balances.get(employee.id, YEAR + 1)
    assert (opened.total_credits, opened.used_credits) == (5, 0)

    leave_service.approve_leave_request(uow, Actor.from_employee(hr), leave_request.id, policy=POLICY)
    assert uow.balances.get(employee.id, YEAR + 1).used_credits == 2


def test_employee_cannot_file_for_someone_else(uow, make_employee):
    employee = make_employee("EMP001")
    other = make_employee("EMP002")

    with pytest.raises(Forbidden):
        _file(uow, employee, 1, actor=Actor.from_employee(other), employee_id=employee.id)


def test_hr_can_file_on_behalf(uow, make_employee, hr):
    employee = make_employee("EMP001", department=Department.ACCOUNTING)

    leave_request = _file(uow, employee, 2, actor=Actor.from_employee(hr), employee_id=employee.id)

    assert leave_request.employee_id == employee.id
    assert leave_request.department == Department.ACCOUNTING
    assert uow.audit_logs.list(leave_request_id=leave_request.id)[0].actor_id == hr.id


def test_file_with_unauthorized_preferred_approver(uow, make_employee):
    employee = make_employee("EMP001")
    manager = make_employee("MGR002", role=Role.MANAGER, department=Department.SALES)

    with pytest.raises(ValidationError):
        _file(uow, employee, 1, approver_id=manager.id)

    with pytest.raises(NotFound):
        _file(uow, employee, 1, approver_id=9999)


def test_file_with_designated_preferred_approver(uow, make_employee, sales_manager):
    employee = make_employee("EMP001")

    leave_request = _file(uow, employee, 1, approver_id=sales_manager.id)

    assert leave_request.approver_id == sales_manager.id


def test_lwop_request_approved_by_hr_with_remarks(uow, make_employee, hr):
    employee = make_employee("EMP001", used_credits=3)
    leave_request = _file(uow, employee, 5)
    assert leave_request.is_lwop is True

    approved = leave_service.approve_leave_request(
        uow, Actor.from_employee(hr), leave_request.id, remarks="ok", policy=POLICY
    )

    assert approved.status == LeaveStatus.APPROVED
    assert approved.approver_id == hr.id
    assert approved.approver_remarks == "ok"
    assert approved.approved_at is not None

    balance = uow.balances.get(employee.id, YEAR)
    assert balance.used_credits == 5
    assert balance.lwop_days == 3

    entry = uow.audit_logs.list(leave_request_id=leave_request.id)[0]
    assert entry.pto_deducted == 2
    assert entry.is_lwop is True
    assert entry.previous_status == LeaveStatus.PENDING
    assert entry.new_status == LeaveStatus.APPROVED
    assert entry.action == "Approved LWOP request (PTO: 2 days, LWOP: 3 days)"


def test_lwop_approval_requires_remarks(uow, make_employee, hr):
    employee = make_employee("EMP001", used_credits=3)
    leave_request = _file(uow, employee, 5)

    for remarks in (None, "", "   "):
        with pytest.raises(ValidationError, match="remarks"):
            leave_service.approve_leave_request(
                uow, Actor.from_employee(hr), leave_request.id, remarks=remarks, policy=POLICY
            )

    assert uow.leave_requests.get(leave_request.id).status == LeaveStatus.PENDING
    assert uow.balances.get(employee.id, YEAR).used_credits == 3


def test_designated_approver_approves_without_remarks(uow, make_employee, sales_manager):
    employee = make_employee("EMP001")
    leave_request = _file(uow, employee, 3, leave_type=LeaveType.SICK)

    approved = leave_service.approve_leave_request(
        uow, Actor.from_employee(sales_manager), leave_request.id, policy=POLICY
    )

    assert approved.status == LeaveStatus.APPROVED
    balance = uow.balances.get(employee.id, YEAR)
    assert balance.used_credits == 3
    assert balance.lwop_days == 0
    entry = uow.audit_logs.list(leave_request_id=leave_request.id)[0]
    assert entry.action == "Approved leave request (PTO: 3 days)"
    assert entry.pto_deducted == 3


def test_unassigned_manager_cannot_approve(uow, make_employee):
    employee = make_employee("EMP001")
    manager = make_employee("MGR002", role=Role.MANAGER, department=Department.SALES)
    leave_request = _file(uow, employee, 1)

    with pytest.raises(Forbidden):
        leave_service.approve_leave_request(uow, Actor.from_employee(manager), leave_request.id, policy=POLICY)
    with pytest.raises(Forbidden):
        leave_service.reject_leave_request(uow, Actor.from_employee(manager), leave_request.id, policy=POLICY)

    assert uow.leave_requests.get(leave_request.id).status == LeaveStatus.PENDING


def test_employee_cannot_approve_own_request(uow, make_employee):
    employee = make_employee("EMP001")
    leave_request = _file(uow, employee, 1)

    with pytest.raises(Forbidden):
        leave_service.approve_leave_request(uow, Actor.from_employee(employee), leave_request.id, policy=POLICY)


def test_approve_twice_mutates_balance_once(uow, make_employee, hr):
    employee = make_employee("EMP001")
    leave_request = _file(uow, employee, 2)
    actor = Actor.from_employee(hr)

    leave_service.approve_leave_request(uow, actor, leave_request.id, policy=POLICY)
    with pytest.raises(InvalidState):
        leave_service.approve_leave_request(uow, actor, leave_request.id, policy=POLICY)

    assert uow.balances.get(employee.id, YEAR).used_credits == 2
    assert len(uow.audit_logs.list(leave_request_id=leave_request.id)) == 2


def test_terminal_requests_reject_every_action(uow, make_employee, hr):
    employee = make_employee("EMP001")
    leave_request = _file(uow, employee, 1)
    actor = Actor.from_employee(hr)
    leave_service.reject_leave_request(uow, actor, leave_request.id, remarks="No cover", policy=POLICY)

    # State guard runs before the authorization guard
    for who in (actor, Actor.from_employee(employee)):
        with pytest.raises(InvalidState):
            leave_service.approve_leave_request(uow, who, leave_request.id, remarks="x", policy=POLICY)
        with pytest.raises(InvalidState):
            leave_service.reject_leave_request(uow, who, leave_request.id, policy=POLICY)


def test_unknown_request_not_found(uow, hr):
    with pytest.raises(NotFound):
        leave_service.approve_leave_request(uow, Actor.from_employee(hr), 12345, policy=POLICY)


def test_reject_leaves_balance_untouched(uow, make_employee, hr):
    employee = make_employee("EMP001", used_credits=1)
    leave_request = _file(uow, employee, 2)

    rejected = leave_service.reject_leave_request(uow, Actor.from_employee(hr), leave_request.id, policy=POLICY)

    assert rejected.status == LeaveStatus.REJECTED
    assert rejected.approver_id == hr.id
    assert rejected.approved_at is not None
    balance = uow.balances.get(employee.id, YEAR)
    assert (balance.used_credits, balance.lwop_days) == (1, 0)
    entry = uow.audit_logs.list(leave_request_id=leave_request.id)[0]
    assert entry.action == "Rejected leave request"
    assert entry.pto_deducted is None
    assert entry.is_lwop is False


def test_rejected_lwop_request_is_not_logged_as_lwop(uow, make_employee, hr):
    employee = make_employee("EMP001", used_credits=4)
    leave_request = _file(uow, employee, 3)
    assert leave_request.is_lwop is True

    leave_service.reject_leave_request(uow, Actor.from_employee(hr), leave_request.id, policy=POLICY)

    rejected_entry, filed_entry = uow.audit_logs.list(leave_request_id=leave_request.id)
    assert rejected_entry.new_status == LeaveStatus.REJECTED
    assert rejected_entry.is_lwop is False
    assert filed_entry.is_lwop is True
    assert uow.balances.get(employee.id, YEAR).lwop_days == 0


def test_reject_remarks_required_when_configured(uow, make_employee, hr):
    employee = make_employee("EMP001")
    leave_request = _file(uow, employee, 1)
    strict = ApprovalPolicy(require_rejection_remarks=True)

    with pytest.raises(ValidationError):
        leave_service.reject_leave_request(uow, Actor.from_employee(hr), leave_request.id, policy=strict)

    rejected = leave_service.reject_leave_request(
        uow, Actor.from_employee(hr), leave_request.id, remarks="Peak season", policy=strict
    )
    assert rejected.approver_remarks == "Peak season"


def test_lwop_rechecked_at_approval(uow, make_employee, hr):
    employee = make_employee("EMP001")
    first = _file(uow, employee, 3)
    second = _file(uow, employee, 3)
    assert first.is_lwop is False
    assert second.is_lwop is False
    actor = Actor.from_employee(hr)

    leave_service.approve_leave_request(uow, actor, first.id, policy=POLICY)

    # Only 2 credits left now, so the second request becomes LWOP and needs remarks
    with pytest.raises(ValidationError):
        leave_service.approve_leave_request(uow, actor, second.id, policy=POLICY)

    approved = leave_service.approve_leave_request(uow, actor, second.id, remarks="Approved as LWOP", policy=POLICY)
    assert approved.is_lwop is True
    balance = uow.balances.get(employee.id, YEAR)
    assert (balance.used_credits, balance.lwop_days) == (5, 1)


def test_lost_update_on_balance_rolls_back(db, uow, make_employee, hr, monkeypatch):
    employee = make_employee("EMP001")
    leave_request = _file(uow, employee, 2)
    original_save = SqlAlchemyBalanceRepository.save

    def racing_save(self, balance):
        # Another transaction commits a change to the same balance row first
        self.session.execute(
            text("UPDATE pto_balances SET version = version + 1 WHERE id = :id"), {"id": balance.id}
        )
        return original_save(self, balance)

    monkeypatch.setattr(SqlAlchemyBalanceRepository, "save", racing_save)
    with pytest.raises(Conflict):
        leave_service.approve_leave_request(uow, Actor.from_employee(hr), leave_request.id, policy=POLICY)
    monkeypatch.undo()

    db.expire_all()
    assert uow.leave_requests.get(leave_request.id).status == LeaveStatus.PENDING
    assert uow.balances.get(employee.id, YEAR).used_credits == 0
    assert len(uow.audit_logs.list(leave_request_id=leave_request.id)) == 1


def test_pending_queue_follows_approval_authority(uow, make_employee, hr, sales_manager):
    sales = make_employee("EMP001", department=Department.SALES)
    accounting = make_employee("EMP002", department=Department.ACCOUNTING)
    sales_request = _file(uow, sales, 1)
    accounting_request = _file(uow, accounting, 1)

    hr_queue = leave_service.list_pending_requests(uow, Actor.from_employee(hr), policy=POLICY)
    assert {r.id for r in hr_queue} == {sales_request.id, accounting_request.id}

    manager_queue = leave_service.list_pending_requests(uow, Actor.from_employee(sales_manager), policy=POLICY)
    assert [r.id for r in manager_queue] == [sales_request.id]

    assert leave_service.list_pending_requests(uow, Actor.from_employee(sales), policy=POLICY) == []


def test_view_request_permissions(uow, make_employee, sales_manager):
    employee = make_employee("EMP001")
    stranger = make_employee("EMP002", department=Department.ACCOUNTING)
    leave_request = _file(uow, employee, 1)

    assert leave_service.get_leave_request(uow, Actor.from_employee(employee), leave_request.id, POLICY)
    assert leave_service.get_leave_request(uow, Actor.from_employee(sales_manager), leave_request.id, POLICY)
    with pytest.raises(Forbidden):
        leave_service.get_leave_request(uow, Actor.from_employee(stranger), leave_request.id, POLICY)


def test_dashboard_counts(uow, make_employee, hr):
    employee = make_employee("EMP001")
    actor = Actor.from_employee(hr)
    requests = [_file(uow, employee, 1) for _ in range(7)]
    leave_service.approve_leave_request(uow, actor, requests[0].id, policy=POLICY)
    leave_service.reject_leave_request(uow, actor, requests[1].id, policy=POLICY)

    dashboard = leave_service.get_dashboard(uow, Actor.from_employee(employee))

    assert dashboard["stats"] == {"pending": 5, "approved": 1, "rejected": 1, "total": 7}
    assert len(dashboard["recent_requests"]) == 5
