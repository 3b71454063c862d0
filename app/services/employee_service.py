"""
Employee service - business logic for employee management
"""
import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import hash_password
from app.models.department import Department
from app.models.employee import Employee
from app.schemas.employee import EmployeeCreate
from app.services.audit_service import log_audit
from app.services.directory_service import DirectoryService
from app.services.leave_approval_service import handle_approver_deactivated
from app.services.notification_service import Notifier

logger = logging.getLogger(__name__)


def create_employee(
    db: Session,
    employee_data: EmployeeCreate,
    actor_id: int
) -> Employee:
    """
    Create a new employee

    Raises:
        HTTPException: If emp_code is taken or a referenced row is missing
    """
    existing = db.query(Employee).filter(Employee.emp_code == employee_data.emp_code).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Employee with emp_code '{employee_data.emp_code}' already exists"
        )

    department = db.query(Department).filter(Department.id == employee_data.department_id).first()
    if not department:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Department with id {employee_data.department_id} not found"
        )
    if not department.active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Department with id {employee_data.department_id} is inactive"
        )

    if employee_data.reporting_manager_id is not None:
        reporting_manager = db.query(Employee).filter(Employee.id == employee_data.reporting_manager_id).first()
        if not reporting_manager:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Reporting manager with id {employee_data.reporting_manager_id} not found"
            )

    if employee_data.standin_id is not None:
        standin = db.query(Employee).filter(Employee.id == employee_data.standin_id).first()
        if not standin:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Standin with id {employee_data.standin_id} not found"
            )
        if not standin.active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Standin with id {employee_data.standin_id} is inactive"
            )

    employee = Employee(
        emp_code=employee_data.emp_code,
        name=employee_data.name,
        email=employee_data.email,
        role=employee_data.role.value,
        department_id=employee_data.department_id,
        reporting_manager_id=employee_data.reporting_manager_id,
        auto_approve=employee_data.auto_approve,
        annual_allowance=(
            employee_data.annual_allowance
            if employee_data.annual_allowance is not None
            else settings.DEFAULT_ANNUAL_ALLOWANCE
        ),
        password_hash=hash_password(employee_data.password) if employee_data.password else None,
        active=True,
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)

    if employee_data.standin_id is not None:
        DirectoryService(db).assign_standin(employee.id, employee_data.standin_id, actor_id)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="CREATE",
        entity_type="employees",
        entity_id=employee.id,
        meta={
            "emp_code": employee.emp_code,
            "role": employee.role,
            "department_id": employee.department_id,
            "auto_approve": employee.auto_approve,
        }
    )
    return employee


def deactivate_employee(
    db: Session,
    employee_id: int,
    actor_id: int,
    notifier: Optional[Notifier] = None,
) -> Employee:
    """
    Deactivate an employee

    Leaves that were only waiting on this employee as standin are
    re-aggregated without them (manager-only fallback).

    Raises:
        EmployeeNotFound: If the employee does not exist
    """
    employee = DirectoryService(db).get_employee(employee_id)
    if not employee.active:
        return employee

    employee.active = False
    db.commit()
    db.refresh(employee)
    logger.info("employee deactivated: employee_id=%s", employee.id)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="DEACTIVATE",
        entity_type="employees",
        entity_id=employee.id,
    )

    changed = handle_approver_deactivated(db, employee.id, notifier)
    if changed:
        logger.info(
            "standin approvals waived: employee_id=%s leave_ids=%s",
            employee.id, [leave.id for leave in changed],
        )
    return employee
