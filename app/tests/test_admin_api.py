"""
Tests for admin endpoints: departments, employees, leave types, reports
"""
from datetime import date

from fastapi import status

from app.models.leave import Decision
from app.services.employee_service import deactivate_employee
from app.services.leave_approval_service import decide, submit_leave


def test_admin_builds_directory(client, auth_headers, admin):
    headers = auth_headers(admin.emp_code)

    response = client.post("/api/v1/departments", json={"name": "Sales"}, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    department_id = response.json()["id"]
    assert response.json()["manager_id"] is None

    response = client.post(
        "/api/v1/employees",
        json={"emp_code": "SAL-MGR", "name": "Sales Manager", "role": "MANAGER", "department_id": department_id, "password": "secret123"},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    manager_id = response.json()["id"]

    response = client.put(f"/api/v1/departments/{department_id}/manager", json={"manager_id": manager_id}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["manager_id"] == manager_id

    response = client.post(
        "/api/v1/employees",
        json={"emp_code": "SAL-01", "name": "Seller", "department_id": department_id, "standin_id": manager_id},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["standin_id"] == manager_id
    assert response.json()["annual_allowance"] == 20


def test_non_admin_cannot_create_department(client, auth_headers, employee):
    response = client.post("/api/v1/departments", json={"name": "Sales"}, headers=auth_headers(employee.emp_code))

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_employee_sets_own_standin(client, auth_headers, employee, standin):
    headers = auth_headers(employee.emp_code)

    response = client.put(f"/api/v1/employees/{employee.id}/standin", json={"standin_id": standin.id}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["standin_id"] == standin.id

    response = client.put(f"/api/v1/employees/{employee.id}/standin", json={"standin_id": employee.id}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error_kind"] == "self_standin_not_allowed"


def test_employee_cannot_pick_deactivated_standin(client, db, auth_headers, admin, employee, standin, notifier):
    deactivate_employee(db, standin.id, admin.id, notifier)

    response = client.put(
        f"/api/v1/employees/{employee.id}/standin",
        json={"standin_id": standin.id},
        headers=auth_headers(employee.emp_code),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error_kind"] == "inactive_standin_not_allowed"


def test_employee_cannot_set_someone_elses_standin(client, auth_headers, employee, standin):
    response = client.put(
        f"/api/v1/employees/{standin.id}/standin",
        json={"standin_id": employee.id},
        headers=auth_headers(employee.emp_code),
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_deactivate_endpoint(client, auth_headers, admin, standin):
    response = client.post(f"/api/v1/employees/{standin.id}/deactivate", headers=auth_headers(admin.emp_code))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["active"] is False

    response = client.post("/api/v1/auth/login", json={"emp_code": standin.emp_code, "password": "secret123"})
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_login_with_wrong_password(client, employee):
    response = client.post("/api/v1/auth/login", json={"emp_code": employee.emp_code, "password": "wrong-pass"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_leave_types(client, auth_headers, admin, employee):
    response = client.post(
        "/api/v1/leave-types",
        json={"name": "Sick", "auto_approve": True, "use_allowance": False},
        headers=auth_headers(admin.emp_code),
    )
    assert response.status_code == status.HTTP_201_CREATED

    response = client.get("/api/v1/leave-types", headers=auth_headers(employee.emp_code))
    assert [lt["name"] for lt in response.json()] == ["Sick"]
    assert response.json()[0]["auto_approve"] is True


def test_leaves_csv_report(client, db, auth_headers, admin, employee_with_standin, manager, leave_type, notifier):
    leave = submit_leave(db, employee_with_standin, leave_type.id, date(2026, 11, 2), date(2026, 11, 6), notifier=notifier)
    decide(db, leave.id, manager, Decision.APPROVE, notifier=notifier)

    response = client.get(
        "/api/v1/reports/leaves.csv",
        params={"from_date": "2026-11-01", "to_date": "2026-11-30"},
        headers=auth_headers(admin.emp_code),
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0].startswith("leave_id,emp_code")
    assert len(lines) == 2
    assert f"MANAGER:{manager.id}:APPROVED" in lines[1]
    assert ",NEW," in lines[1]
