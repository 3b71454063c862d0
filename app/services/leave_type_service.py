"""
Leave type service
"""
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.leave import LeaveType
from app.schemas.leave_type import LeaveTypeCreate
from app.services.audit_service import log_audit


def create_leave_type(db: Session, data: LeaveTypeCreate, actor_id: int) -> LeaveType:
    """
    Create a leave type

    Raises:
        HTTPException: If a leave type with the same name exists
    """
    existing = db.query(LeaveType).filter(func.lower(LeaveType.name) == func.lower(data.name)).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Leave type '{data.name}' already exists"
        )

    leave_type = LeaveType(
        name=data.name,
        auto_approve=data.auto_approve,
        use_allowance=data.use_allowance,
        active=True,
    )
    db.add(leave_type)
    db.commit()
    db.refresh(leave_type)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="CREATE",
        entity_type="leave_types",
        entity_id=leave_type.id,
        meta=data.model_dump(),
    )
    return leave_type


def list_leave_types(db: Session) -> List[LeaveType]:
    return db.query(LeaveType).filter(LeaveType.active == True).order_by(LeaveType.name).all()  # noqa: E712
