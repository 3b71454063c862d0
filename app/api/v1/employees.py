"""
Employee endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.deps import get_db, get_current_user, require_roles
from app.models.employee import Employee, Role
from app.schemas.employee import EmployeeCreate, EmployeeOut, StandinAssignRequest
from app.services.directory_service import DirectoryService
from app.services.employee_service import create_employee, deactivate_employee
from app.services.notification_service import Notifier, get_notifier

router = APIRouter()


@router.post("", response_model=EmployeeOut, status_code=201)
async def create_employee_endpoint(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_roles(Role.ADMIN))
):
    """Create an employee (admin only)"""
    return create_employee(db, employee_data, current_user.id)


@router.get("/me", response_model=EmployeeOut)
async def get_me(current_user: Employee = Depends(get_current_user)):
    """Current user's profile"""
    return current_user


@router.get("/{employee_id}", response_model=EmployeeOut)
async def get_employee_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Get one employee"""
    return DirectoryService(db).get_employee(employee_id)


@router.put("/{employee_id}/standin", response_model=EmployeeOut)
async def assign_standin_endpoint(
    employee_id: int,
    request: StandinAssignRequest,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """
    Set or clear an employee's standin

    Employees manage their own standin; admins can set anyone's.
    Rejected with self_standin_not_allowed when the standin is the employee.
    """
    if current_user.role != Role.ADMIN and current_user.id != employee_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only change your own standin"
        )
    return DirectoryService(db).assign_standin(employee_id, request.standin_id, current_user.id)


@router.post("/{employee_id}/deactivate", response_model=EmployeeOut)
async def deactivate_employee_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: Employee = Depends(require_roles(Role.ADMIN))
):
    """Deactivate an employee (admin only); pending standin approvals fall back to the manager"""
    return deactivate_employee(db, employee_id, current_user.id, notifier)
