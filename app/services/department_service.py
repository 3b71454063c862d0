"""
Department service - business logic for department management
"""
import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.department import Department
from app.models.employee import Employee
from app.models.manager_department import ManagerDepartment
from app.schemas.department import DepartmentCreate
from app.services.audit_service import log_audit

logger = logging.getLogger(__name__)


def get_department(db: Session, department_id: int) -> Department:
    department = db.query(Department).filter(Department.id == department_id).first()
    if not department:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Department with id {department_id} not found"
        )
    return department


def create_department(
    db: Session,
    department_data: DepartmentCreate,
    actor_id: int
) -> Department:
    """
    Create a new department

    Raises:
        HTTPException: If department name already exists
    """
    existing = db.query(Department).filter(
        func.lower(Department.name) == func.lower(department_data.name)
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Department with name '{department_data.name}' already exists"
        )

    department = Department(name=department_data.name, active=department_data.active)
    db.add(department)
    db.commit()
    db.refresh(department)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="CREATE",
        entity_type="departments",
        entity_id=department.id,
        meta={"name": department.name, "active": department.active}
    )
    return department


def list_departments(db: Session, active_only: Optional[bool] = None) -> List[Department]:
    query = db.query(Department)
    if active_only:
        query = query.filter(Department.active == True)  # noqa: E712
    return query.order_by(Department.name).all()


def assign_manager(
    db: Session,
    department_id: int,
    manager_id: Optional[int],
    actor_id: int
) -> Department:
    """
    Set (or clear with None) the manager of a department

    The manager approves leaves of every department member except themself.

    Raises:
        HTTPException: If the department or manager does not exist, or the manager is inactive
    """
    department = get_department(db, department_id)
    before = department.manager_id

    if manager_id is not None:
        manager = db.query(Employee).filter(Employee.id == manager_id).first()
        if not manager:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Employee with id {manager_id} not found"
            )
        if not manager.active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Inactive employees cannot manage a department"
            )

    if department.manager_assignment is not None:
        db.delete(department.manager_assignment)
        db.flush()
    if manager_id is not None:
        db.add(ManagerDepartment(manager_id=manager_id, department_id=department.id))
    db.commit()
    db.refresh(department)

    logger.info("department manager assigned: department_id=%s before=%s after=%s", department.id, before, manager_id)
    log_audit(
        db=db,
        actor_id=actor_id,
        action="ASSIGN_MANAGER",
        entity_type="departments",
        entity_id=department.id,
        meta={"before": before, "after": manager_id}
    )
    return department
