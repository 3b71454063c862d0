"""
Report endpoints (CSV exports)
"""
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from app.core.deps import get_db, require_roles
from app.models.employee import Employee, Role
from app.services.leave_approval_service import list_leaves_in_range
from app.utils.csv_export import stream_csv
from app.utils.enums import enum_to_str

router = APIRouter()

LEAVE_CSV_HEADERS = [
    "leave_id",
    "emp_code",
    "employee_name",
    "leave_type",
    "date_start",
    "date_end",
    "days",
    "status",
    "auto_approved",
    "approvals",
]


@router.get("/leaves.csv")
async def export_leaves_csv(
    from_date: date = Query(..., description="Start of the reporting window"),
    to_date: date = Query(..., description="End of the reporting window (inclusive)"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_roles(Role.ADMIN))
):
    """
    Export leaves intersecting the window as CSV (admin only)

    The approvals column lists ROLE:approver_id:DECISION entries separated by ';'.
    """
    if from_date > to_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from_date must be less than or equal to to_date"
        )

    leaves = list_leaves_in_range(db, from_date, to_date)
    rows = [
        {
            "leave_id": leave.id,
            "emp_code": leave.employee.emp_code,
            "employee_name": leave.employee.name,
            "leave_type": leave.leave_type.name,
            "date_start": leave.date_start.isoformat(),
            "date_end": leave.date_end.isoformat(),
            "days": leave.days,
            "status": enum_to_str(leave.status),
            "auto_approved": "yes" if leave.auto_approved else "no",
            "approvals": ";".join(
                f"{enum_to_str(r.approver_role)}:{r.approver_id}:{enum_to_str(r.decision_status)}"
                for r in leave.approval_records
            ),
        }
        for leave in leaves
    ]

    filename = f"leaves_{from_date.strftime('%Y%m%d')}_{to_date.strftime('%Y%m%d')}.csv"
    return stream_csv(headers=LEAVE_CSV_HEADERS, rows=rows, filename=filename)
