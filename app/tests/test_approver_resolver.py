"""
Tests for approver resolution
"""
import pytest
from sqlalchemy.orm import Session

from app.core.exceptions import NoManagerConfigured
from app.models.employee import Role
from app.models.leave import ApproverRole
from app.services.approver_resolver import ResolvedApprover, resolve_approvers, resolve_for_employee
from app.services.directory_service import DirectoryService


def test_manager_only_without_standin():
    assert resolve_approvers(1, 2, None) == [ResolvedApprover(2, ApproverRole.MANAGER)]


def test_manager_and_standin():
    assert resolve_approvers(1, 2, 3) == [
        ResolvedApprover(2, ApproverRole.MANAGER),
        ResolvedApprover(3, ApproverRole.STANDIN),
    ]


def test_standin_equal_to_manager_collapses_to_one_entry():
    assert resolve_approvers(1, 2, 2) == [ResolvedApprover(2, ApproverRole.MANAGER)]


def test_standin_equal_to_employee_is_dropped():
    assert resolve_approvers(1, 2, 1) == [ResolvedApprover(2, ApproverRole.MANAGER)]


def test_standin_ignored_when_disabled():
    assert resolve_approvers(1, 2, 3, standin_enabled=False) == [ResolvedApprover(2, ApproverRole.MANAGER)]


@pytest.mark.parametrize("manager_id", [None, 1])
def test_missing_manager_raises(manager_id):
    with pytest.raises(NoManagerConfigured):
        resolve_approvers(1, manager_id, 3)


def test_resolve_for_employee_uses_department_manager(db: Session, employee_with_standin, manager, standin):
    approvers = resolve_for_employee(DirectoryService(db), employee_with_standin)

    assert approvers == [
        ResolvedApprover(manager.id, ApproverRole.MANAGER),
        ResolvedApprover(standin.id, ApproverRole.STANDIN),
    ]


def test_resolve_for_employee_skips_inactive_standin(db: Session, employee_with_standin, manager, standin):
    standin.active = False
    db.commit()

    approvers = resolve_for_employee(DirectoryService(db), employee_with_standin)

    assert approvers == [ResolvedApprover(manager.id, ApproverRole.MANAGER)]


def test_department_manager_falls_back_to_reporting_manager(db: Session, make_employee, manager):
    director = make_employee("DIR001", role=Role.MANAGER, name="Director")
    manager.reporting_manager_id = director.id
    db.commit()

    approvers = resolve_for_employee(DirectoryService(db), manager)

    assert approvers == [ResolvedApprover(director.id, ApproverRole.MANAGER)]


def test_department_manager_without_escalation_has_no_manager(db: Session, manager):
    with pytest.raises(NoManagerConfigured):
        resolve_for_employee(DirectoryService(db), manager)


def test_inactive_manager_counts_as_missing(db: Session, employee, manager):
    manager.active = False
    db.commit()

    with pytest.raises(NoManagerConfigured):
        resolve_for_employee(DirectoryService(db), employee)
