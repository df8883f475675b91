"""
Tests for department approver management
"""
import pytest
from fastapi import status

from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.core.identity import Actor
from app.models.employee import Department, Role
from app.services import department_approver_service as approvers


@pytest.fixture
def admin(make_employee):
    return make_employee("ADM001", role=Role.ADMIN, department=Department.HUMAN_RESOURCES)


@pytest.fixture
def manager(make_employee):
    return make_employee("MGR001", role=Role.MANAGER, department=Department.SALES)


def test_add_is_idempotent(uow, admin, manager):
    actor = Actor.from_employee(admin)

    first = approvers.add_department_approver(uow, actor, Department.SALES, manager.id)
    second = approvers.add_department_approver(uow, actor, Department.SALES, manager.id)

    assert first.id == second.id
    assert len(approvers.list_department_approvers(uow, actor, Department.SALES)) == 1


def test_multiple_approvers_per_department(uow, admin, manager, make_employee):
    actor = Actor.from_employee(admin)
    other = make_employee("MGR002", role=Role.MANAGER, department=Department.ACCOUNTING)

    approvers.add_department_approver(uow, actor, Department.SALES, manager.id)
    approvers.add_department_approver(uow, actor, Department.SALES, other.id)

    assigned = approvers.list_department_approvers(uow, actor, Department.SALES)
    assert {a.approver_id for a in assigned} == {manager.id, other.id}


def test_set_replaces_existing_approvers(uow, admin, manager, make_employee):
    actor = Actor.from_employee(admin)
    other = make_employee("MGR002", role=Role.MANAGER, department=Department.ACCOUNTING)
    approvers.add_department_approver(uow, actor, Department.SALES, manager.id)
    approvers.add_department_approver(uow, actor, Department.ACCOUNTING, manager.id)

    assignment = approvers.set_department_approver(uow, actor, Department.SALES, other.id)

    assert assignment.approver_id == other.id
    assert [a.approver_id for a in approvers.list_department_approvers(uow, actor, Department.SALES)] == [other.id]
    # Other departments untouched
    assert len(approvers.list_department_approvers(uow, actor, Department.ACCOUNTING)) == 1


def test_remove_approver(uow, admin, manager):
    actor = Actor.from_employee(admin)
    assignment = approvers.add_department_approver(uow, actor, Department.SALES, manager.id)

    approvers.remove_department_approver(uow, actor, assignment.id)

    assert approvers.list_department_approvers(uow, actor) == []
    with pytest.raises(NotFound):
        approvers.remove_department_approver(uow, actor, assignment.id)


def test_assignee_must_not_be_plain_employee(uow, admin, make_employee):
    employee = make_employee("EMP001")

    with pytest.raises(ValidationError):
        approvers.add_department_approver(uow, Actor.from_employee(admin), Department.SALES, employee.id)
    with pytest.raises(NotFound):
        approvers.add_department_approver(uow, Actor.from_employee(admin), Department.SALES, 4242)


def test_only_admin_manages_approvers(uow, manager, make_employee):
    hr = make_employee("HR001", role=Role.HR, department=Department.HUMAN_RESOURCES)

    for actor in (Actor.from_employee(hr), Actor.from_employee(manager)):
        with pytest.raises(Forbidden):
            approvers.add_department_approver(uow, actor, Department.SALES, manager.id)


def test_approver_endpoints(client, admin, manager, auth_headers):
    headers = auth_headers(admin)

    created = client.post(
        "/api/v1/department-approvers",
        json={"department": "sales", "approver_id": manager.id},
        headers=headers,
    )
    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["approver"]["emp_code"] == "MGR001"

    listed = client.get("/api/v1/department-approvers?department=sales", headers=headers)
    assert [a["approver_id"] for a in listed.json()] == [manager.id]

    replaced = client.put(
        "/api/v1/department-approvers",
        json={"department": "sales", "approver_id": admin.id},
        headers=headers,
    )
    assert replaced.status_code == status.HTTP_200_OK

    assignment_id = replaced.json()["id"]
    deleted = client.delete(f"/api/v1/department-approvers/{assignment_id}", headers=headers)
    assert deleted.status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/api/v1/department-approvers", headers=headers).json() == []


def test_approver_endpoints_admin_only(client, manager, auth_headers):
    response = client.get("/api/v1/department-approvers", headers=auth_headers(manager))
    assert response.status_code == status.HTTP_403_FORBIDDEN
