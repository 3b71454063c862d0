"""
Tests for standin configuration and deactivation fallback
"""
from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    EmployeeNotFound,
    InactiveStandinNotAllowed,
    InvalidLeaveState,
    SelfStandinNotAllowed,
)
from app.models.audit_log import AuditLog
from app.models.leave import Decision, LeaveStatus
from app.services.directory_service import DirectoryService
from app.services.employee_service import deactivate_employee
from app.services.leave_approval_service import decide, submit_leave
from app.services.notification_service import NotificationKind

START = date(2026, 11, 2)
END = date(2026, 11, 6)


def test_assign_standin(db: Session, employee, standin, admin):
    updated = DirectoryService(db).assign_standin(employee.id, standin.id, admin.id)

    assert updated.standin_id == standin.id
    entry = db.query(AuditLog).filter(AuditLog.action == "STANDIN_ASSIGN").one()
    assert entry.meta_json == {"before": None, "after": standin.id}


def test_self_standin_is_rejected(db: Session, employee):
    with pytest.raises(SelfStandinNotAllowed):
        DirectoryService(db).assign_standin(employee.id, employee.id, employee.id)

    db.refresh(employee)
    assert employee.standin_id is None


def test_self_standin_is_rejected_by_the_database(db: Session, employee):
    employee.standin_id = employee.id
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_unknown_standin(db: Session, employee):
    with pytest.raises(EmployeeNotFound):
        DirectoryService(db).assign_standin(employee.id, 9999, employee.id)


def test_clear_standin(db: Session, employee_with_standin):
    updated = DirectoryService(db).assign_standin(employee_with_standin.id, None, employee_with_standin.id)

    assert updated.standin_id is None


def test_mutual_standins_are_allowed(db: Session, employee, standin):
    directory = DirectoryService(db)
    directory.assign_standin(employee.id, standin.id, employee.id)
    directory.assign_standin(standin.id, employee.id, standin.id)

    assert directory.get_standin(employee.id) == standin.id
    assert directory.get_standin(standin.id) == employee.id


def test_deactivated_standin_falls_back_to_manager(
    db: Session, employee_with_standin, manager, standin, admin, leave_type, notifier, sender
):
    leave = submit_leave(db, employee_with_standin, leave_type.id, START, END, notifier=notifier)
    decide(db, leave.id, manager, Decision.APPROVE, notifier=notifier)
    sender.clear()

    deactivate_employee(db, standin.id, admin.id, notifier)

    db.refresh(leave)
    assert leave.status == LeaveStatus.APPROVED
    (recipient, payload), = sender.of_kind(NotificationKind.FULLY_APPROVED)
    assert recipient == employee_with_standin.id
    assert payload["standin_waived"] is True


def test_deactivated_standin_still_waits_for_manager(
    db: Session, employee_with_standin, manager, standin, admin, leave_type, notifier
):
    leave = submit_leave(db, employee_with_standin, leave_type.id, START, END, notifier=notifier)

    deactivate_employee(db, standin.id, admin.id, notifier)
    db.refresh(leave)
    assert leave.status == LeaveStatus.NEW

    leave = decide(db, leave.id, manager, Decision.APPROVE, notifier=notifier)
    assert leave.status == LeaveStatus.APPROVED


def test_deactivated_manager_is_not_waived(
    db: Session, employee_with_standin, manager, standin, admin, leave_type, notifier
):
    leave = submit_leave(db, employee_with_standin, leave_type.id, START, END, notifier=notifier)
    decide(db, leave.id, standin, Decision.APPROVE, notifier=notifier)

    deactivate_employee(db, manager.id, admin.id, notifier)

    db.refresh(leave)
    assert leave.status == LeaveStatus.NEW


def test_new_leave_ignores_inactive_standin(
    db: Session, employee_with_standin, manager, standin, admin, leave_type, notifier
):
    deactivate_employee(db, standin.id, admin.id, notifier)

    leave = submit_leave(db, employee_with_standin, leave_type.id, START, END, notifier=notifier)

    assert [r.approver_id for r in leave.approval_records] == [manager.id]


def test_waived_standin_cannot_reject_approved_leave(
    db: Session, employee_with_standin, manager, standin, admin, leave_type, notifier, sender
):
    leave = submit_leave(db, employee_with_standin, leave_type.id, START, END, notifier=notifier)
    decide(db, leave.id, manager, Decision.APPROVE, notifier=notifier)
    deactivate_employee(db, standin.id, admin.id, notifier)
    sender.clear()

    with pytest.raises(InvalidLeaveState):
        decide(db, leave.id, standin, Decision.REJECT, notifier=notifier)

    db.refresh(leave)
    assert leave.status == LeaveStatus.APPROVED
    assert sender.sent == []


def test_reactivated_standin_cannot_reopen_approved_leave(
    db: Session, employee_with_standin, manager, standin, admin, leave_type, notifier
):
    leave = submit_leave(db, employee_with_standin, leave_type.id, START, END, notifier=notifier)
    decide(db, leave.id, manager, Decision.APPROVE, notifier=notifier)
    deactivate_employee(db, standin.id, admin.id, notifier)

    standin.active = True
    db.commit()

    with pytest.raises(InvalidLeaveState):
        decide(db, leave.id, standin, Decision.REJECT, notifier=notifier)

    db.refresh(leave)
    assert leave.status == LeaveStatus.APPROVED


def test_inactive_standin_cannot_decide(
    db: Session, employee_with_standin, manager, standin, admin, leave_type, notifier
):
    leave = submit_leave(db, employee_with_standin, leave_type.id, START, END, notifier=notifier)
    deactivate_employee(db, standin.id, admin.id, notifier)

    with pytest.raises(InvalidLeaveState):
        decide(db, leave.id, standin, Decision.REJECT, notifier=notifier)

    leave = decide(db, leave.id, manager, Decision.APPROVE, notifier=notifier)
    assert leave.status == LeaveStatus.APPROVED


def test_inactive_standin_cannot_be_assigned(db: Session, employee, standin, admin, notifier):
    deactivate_employee(db, standin.id, admin.id, notifier)

    with pytest.raises(InactiveStandinNotAllowed):
        DirectoryService(db).assign_standin(employee.id, standin.id, employee.id)

    db.refresh(employee)
    assert employee.standin_id is None
