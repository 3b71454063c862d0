"""
Database models

Every entity is imported here first; relationships declared by name are then
resolved in a single configure_mappers() pass.
"""
from sqlalchemy.orm import configure_mappers

from app.models.department import Department
from app.models.employee import Employee, Role
from app.models.manager_department import ManagerDepartment
from app.models.audit_log import AuditLog
from app.models.leave import (
    Leave,
    LeaveType,
    LeaveApprovalRecord,
    LeaveStatus,
    ApproverRole,
    DecisionStatus,
    Decision,
    ACTIVE_LEAVE_STATUSES,
)

configure_mappers()

__all__ = [
    "Department",
    "Employee",
    "ManagerDepartment",
    "Role",
    "AuditLog",
    "Leave",
    "LeaveType",
    "LeaveApprovalRecord",
    "LeaveStatus",
    "ApproverRole",
    "DecisionStatus",
    "Decision",
    "ACTIVE_LEAVE_STATUSES",
]
