"""
Leave type endpoints
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.deps import get_db, get_current_user, require_roles
from app.models.employee import Employee, Role
from app.schemas.leave_type import LeaveTypeCreate, LeaveTypeOut
from app.services.leave_type_service import create_leave_type, list_leave_types

router = APIRouter()


@router.post("", response_model=LeaveTypeOut, status_code=201)
async def create_leave_type_endpoint(
    data: LeaveTypeCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_roles(Role.ADMIN))
):
    """Create a leave type (admin only)"""
    return create_leave_type(db, data, current_user.id)


@router.get("", response_model=List[LeaveTypeOut])
async def list_leave_types_endpoint(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """List active leave types"""
    return list_leave_types(db)
