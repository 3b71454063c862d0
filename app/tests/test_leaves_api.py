"""
Tests for leave endpoints
"""
from fastapi import status

from app.services.notification_service import NotificationKind

LEAVE_BODY = {"date_start": "2026-11-02", "date_end": "2026-11-06", "comment": "holiday"}


def _submit(client, headers, leave_type_id, **overrides):
    body = {**LEAVE_BODY, "leave_type_id": leave_type_id, **overrides}
    return client.post("/api/v1/leaves", json=body, headers=headers)


def test_submit_and_approve_dual_leave(client, auth_headers, employee_with_standin, manager, standin, leave_type, sender):
    employee_headers = auth_headers(employee_with_standin.emp_code)

    response = _submit(client, employee_headers, leave_type.id)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "NEW"
    assert data["days"] == 5
    assert sorted(r["approver_role"] for r in data["approval_records"]) == ["MANAGER", "STANDIN"]
    leave_id = data["id"]

    response = client.get("/api/v1/leaves/pending", headers=auth_headers(standin.emp_code))
    assert response.status_code == status.HTTP_200_OK
    assert [item["id"] for item in response.json()["items"]] == [leave_id]

    response = client.post(f"/api/v1/leaves/{leave_id}/approve", headers=auth_headers(manager.emp_code))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "NEW"

    response = client.post(
        f"/api/v1/leaves/{leave_id}/approve",
        json={"comment": "covered"},
        headers=auth_headers(standin.emp_code),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "APPROVED"
    assert NotificationKind.FULLY_APPROVED in sender.kinds_for(employee_with_standin.id)

    response = client.get("/api/v1/leaves/my", headers=employee_headers)
    assert response.json()["total"] == 1
    assert response.json()["items"][0]["status"] == "APPROVED"


def test_second_decision_returns_already_decided(client, auth_headers, employee, manager, leave_type):
    leave_id = _submit(client, auth_headers(employee.emp_code), leave_type.id).json()["id"]
    manager_headers = auth_headers(manager.emp_code)

    client.post(f"/api/v1/leaves/{leave_id}/reject", headers=manager_headers)
    response = client.post(f"/api/v1/leaves/{leave_id}/approve", headers=manager_headers)

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error_kind"] == "already_decided"


def test_non_approver_gets_not_an_approver(client, auth_headers, employee, manager, make_employee, leave_type):
    leave_id = _submit(client, auth_headers(employee.emp_code), leave_type.id).json()["id"]
    outsider = make_employee("EMP555")

    response = client.post(f"/api/v1/leaves/{leave_id}/approve", headers=auth_headers(outsider.emp_code))

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error_kind"] == "not_an_approver"


def test_submit_without_manager(client, auth_headers, make_employee, leave_type):
    loner = make_employee("EMP404")

    response = _submit(client, auth_headers(loner.emp_code), leave_type.id)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error_kind"] == "no_manager_configured"


def test_submit_with_inverted_dates(client, auth_headers, employee, leave_type):
    response = _submit(client, auth_headers(employee.emp_code), leave_type.id, date_start="2026-11-06", date_end="2026-11-02")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_revoke_flow(client, auth_headers, employee_with_standin, manager, standin, leave_type):
    leave_id = _submit(client, auth_headers(employee_with_standin.emp_code), leave_type.id).json()["id"]
    manager_headers = auth_headers(manager.emp_code)
    standin_headers = auth_headers(standin.emp_code)
    client.post(f"/api/v1/leaves/{leave_id}/approve", headers=manager_headers)
    client.post(f"/api/v1/leaves/{leave_id}/approve", headers=standin_headers)

    response = client.post(f"/api/v1/leaves/{leave_id}/revoke", headers=standin_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error_kind"] == "manager_only_action"

    response = client.post(f"/api/v1/leaves/{leave_id}/revoke", json={"comment": "needed"}, headers=manager_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "PENDED_REVOKE"

    response = client.post(f"/api/v1/leaves/{leave_id}/approve", headers=standin_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error_kind"] == "manager_only_action"

    response = client.post(f"/api/v1/leaves/{leave_id}/approve", headers=manager_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "REJECTED"


def test_cancel_endpoint(client, auth_headers, employee, manager, leave_type):
    employee_headers = auth_headers(employee.emp_code)
    leave_id = _submit(client, employee_headers, leave_type.id).json()["id"]

    response = client.post(f"/api/v1/leaves/{leave_id}/cancel", headers=auth_headers(manager.emp_code))
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error_kind"] == "not_leave_owner"

    response = client.post(f"/api/v1/leaves/{leave_id}/cancel", headers=employee_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "CANCELED"


def test_leave_visibility(client, auth_headers, employee, manager, make_employee, leave_type):
    leave_id = _submit(client, auth_headers(employee.emp_code), leave_type.id).json()["id"]
    outsider = make_employee("EMP555")

    assert client.get(f"/api/v1/leaves/{leave_id}", headers=auth_headers(manager.emp_code)).status_code == 200
    response = client.get(f"/api/v1/leaves/{leave_id}", headers=auth_headers(outsider.emp_code))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error_kind"] == "leave_not_found"


def test_allowance_endpoint(client, auth_headers, employee, manager, leave_type):
    employee_headers = auth_headers(employee.emp_code)
    _submit(client, employee_headers, leave_type.id)

    response = client.get("/api/v1/leaves/allowance/me", params={"year": 2026}, headers=employee_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "year": 2026,
        "allowance": employee.annual_allowance,
        "used": 0,
        "pending": 5,
        "remaining": employee.annual_allowance,
    }


def test_requires_authentication(client):
    response = client.get("/api/v1/leaves/my")

    assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)
