"""
Allowance accounting - working day counts and yearly usage
"""
from datetime import date, timedelta
from typing import Dict

from sqlalchemy.orm import Session

from app.models.employee import Employee
from app.models.leave import Leave, LeaveStatus, LeaveType


def is_weekend(check_date: date) -> bool:
    """Saturday and Sunday are not working days"""
    return check_date.weekday() >= 5


def count_working_days(date_start: date, date_end: date) -> int:
    """
    Count working days between date_start and date_end (inclusive).

    Returns 0 when the range is inverted.
    """
    if date_start > date_end:
        return 0

    days = 0
    current = date_start
    while current <= date_end:
        if not is_weekend(current):
            days += 1
        current += timedelta(days=1)
    return days


def get_allowance_summary(db: Session, employee: Employee, year: int) -> Dict[str, int]:
    """
    Allowance usage for one calendar year.

    Leaves count towards the year they start in. APPROVED and PENDED_REVOKE
    leaves are used, NEW leaves are pending; types without use_allowance are ignored.
    """
    rows = (
        db.query(Leave.status, Leave.days)
        .join(LeaveType, Leave.leave_type_id == LeaveType.id)
        .filter(
            Leave.employee_id == employee.id,
            LeaveType.use_allowance == True,  # noqa: E712
            Leave.date_start >= date(year, 1, 1),
            Leave.date_start <= date(year, 12, 31),
        )
        .all()
    )

    used = sum(days for status, days in rows if status in (LeaveStatus.APPROVED, LeaveStatus.PENDED_REVOKE))
    pending = sum(days for status, days in rows if status == LeaveStatus.NEW)

    return {
        "year": year,
        "allowance": employee.annual_allowance,
        "used": used,
        "pending": pending,
        "remaining": employee.annual_allowance - used,
    }
