"""
Department endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.core.deps import get_db, get_current_user, require_roles
from app.models.employee import Employee, Role
from app.schemas.department import DepartmentCreate, DepartmentOut, AssignManagerRequest
from app.services.department_service import create_department, list_departments, assign_manager

router = APIRouter()


@router.post("", response_model=DepartmentOut, status_code=201)
async def create_department_endpoint(
    department_data: DepartmentCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_roles(Role.ADMIN))
):
    """Create a department (admin only)"""
    return create_department(db, department_data, current_user.id)


@router.get("", response_model=List[DepartmentOut])
async def list_departments_endpoint(
    active_only: Optional[bool] = Query(None, description="Return only active departments"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """List departments with their managers"""
    return list_departments(db, active_only=active_only)


@router.put("/{department_id}/manager", response_model=DepartmentOut)
async def assign_manager_endpoint(
    department_id: int,
    request: AssignManagerRequest,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_roles(Role.ADMIN))
):
    """Set or clear the department manager (admin only)"""
    return assign_manager(db, department_id, request.manager_id, current_user.id)
