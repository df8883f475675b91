"""
Tests for employee management endpoints
"""
from fastapi import status

from app.models.employee import Department, Role


def test_list_employees_with_balances(client, make_employee, auth_headers):
    hr = make_employee("HR001", role=Role.HR, department=Department.HUMAN_RESOURCES)
    make_employee("EMP001", used_credits=2)
    make_employee("EMP002", total_credits=None)

    response = client.get("/api/v1/employees", headers=auth_headers(hr))

    assert response.status_code == status.HTTP_200_OK
    rows = {row["employee"]["emp_code"]: row for row in response.json()}
    assert set(rows) == {"HR001", "EMP001", "EMP002"}
    assert rows["EMP001"]["balance"]["used_credits"] == 2
    assert rows["EMP001"]["balance"]["remaining_credits"] == 3
    assert rows["EMP002"]["balance"] is None


def test_list_employees_forbidden_for_employee(client, make_employee, auth_headers):
    employee = make_employee("EMP001")

    response = client.get("/api/v1/employees", headers=auth_headers(employee))

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_changes_role(client, make_employee, auth_headers):
    admin = make_employee("ADM001", role=Role.ADMIN, department=Department.HUMAN_RESOURCES)
    employee = make_employee("EMP001")

    response = client.patch(
        f"/api/v1/employees/{employee.id}/role", json={"role": "manager"}, headers=auth_headers(admin)
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["role"] == "manager"


def test_change_role_unknown_employee(client, make_employee, auth_headers):
    admin = make_employee("ADM001", role=Role.ADMIN, department=Department.HUMAN_RESOURCES)

    response = client.patch("/api/v1/employees/999/role", json={"role": "hr"}, headers=auth_headers(admin))

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_hr_cannot_change_role(client, make_employee, auth_headers):
    hr = make_employee("HR001", role=Role.HR, department=Department.HUMAN_RESOURCES)
    employee = make_employee("EMP001")

    response = client.patch(
        f"/api/v1/employees/{employee.id}/role", json={"role": "admin"}, headers=auth_headers(hr)
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
