"""
Leave endpoints
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.core.deps import get_db, get_current_user
from app.models.employee import Employee
from app.models.leave import Decision
from app.schemas.leave import (
    AllowanceOut,
    DecisionRequest,
    LeaveListResponse,
    LeaveOut,
    LeaveSubmitRequest,
)
from app.services import leave_approval_service as approvals
from app.services.allowance_service import get_allowance_summary
from app.services.notification_service import Notifier, get_notifier

router = APIRouter()


@router.post("", response_model=LeaveOut, status_code=201)
async def submit_leave_endpoint(
    leave_data: LeaveSubmitRequest,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: Employee = Depends(get_current_user)
):
    """
    Submit a leave request for the current user

    The leave starts NEW with one pending approval per approver (department
    manager, plus the standin when one is configured), or APPROVED straight
    away when auto-approval applies.
    """
    return approvals.submit_leave(
        db=db,
        employee=current_user,
        leave_type_id=leave_data.leave_type_id,
        date_start=leave_data.date_start,
        date_end=leave_data.date_end,
        comment=leave_data.comment,
        notifier=notifier,
    )


@router.get("/my", response_model=LeaveListResponse)
async def my_leaves(
    year: Optional[int] = Query(None, description="Only leaves starting in this year"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Current user's leaves, every status included"""
    leaves = approvals.list_my_leaves(db, current_user, year)
    return LeaveListResponse(items=leaves, total=len(leaves))


@router.get("/pending", response_model=LeaveListResponse)
async def pending_for_me(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Leaves waiting on the current user's decision, oldest first"""
    leaves = approvals.list_pending_for_approver(db, current_user)
    return LeaveListResponse(items=leaves, total=len(leaves))


@router.get("/allowance/me", response_model=AllowanceOut)
async def my_allowance(
    year: Optional[int] = Query(None, description="Calendar year, defaults to the current year"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Current user's allowance usage for the year"""
    return get_allowance_summary(db, current_user, year or date.today().year)


@router.get("/{leave_id}", response_model=LeaveOut)
async def get_leave_endpoint(
    leave_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Get a leave with its approval records"""
    return approvals.get_leave_for_viewer(db, leave_id, current_user)


@router.post("/{leave_id}/approve", response_model=LeaveOut)
async def approve_leave_endpoint(
    leave_id: int,
    request: Optional[DecisionRequest] = None,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: Employee = Depends(get_current_user)
):
    """
    Approve a leave (or, while a revoke is pending, approve the revoke)

    Errors: not_an_approver, already_decided, manager_only_action.
    """
    comment = request.comment if request else None
    return approvals.decide(db, leave_id, current_user, Decision.APPROVE, comment, notifier)


@router.post("/{leave_id}/reject", response_model=LeaveOut)
async def reject_leave_endpoint(
    leave_id: int,
    request: Optional[DecisionRequest] = None,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: Employee = Depends(get_current_user)
):
    """Reject a leave (or, while a revoke is pending, keep the leave approved)"""
    comment = request.comment if request else None
    return approvals.decide(db, leave_id, current_user, Decision.REJECT, comment, notifier)


@router.post("/{leave_id}/revoke", response_model=LeaveOut)
async def revoke_leave_endpoint(
    leave_id: int,
    request: Optional[DecisionRequest] = None,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: Employee = Depends(get_current_user)
):
    """Revoke an approved leave (manager only)"""
    comment = request.comment if request else None
    return approvals.revoke(db, leave_id, current_user, comment, notifier)


@router.post("/{leave_id}/cancel", response_model=LeaveOut)
async def cancel_leave_endpoint(
    leave_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Cancel one of your own leaves that is still NEW"""
    return approvals.cancel(db, leave_id, current_user)
