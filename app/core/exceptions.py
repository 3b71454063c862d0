"""
Domain errors raised by the leave approval workflow

Each error carries a stable ``kind`` that the route layer exposes as
``error_kind`` so clients can translate it into a user-facing message.
"""
from typing import Optional
from fastapi import status


class LeaveWorkflowError(Exception):
    """Base class for all workflow errors surfaced to the route layer"""

    kind = "leave_workflow_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Leave workflow error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NoManagerConfigured(LeaveWorkflowError):
    kind = "no_manager_configured"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "No manager is configured for this employee"


class SelfStandinNotAllowed(LeaveWorkflowError):
    kind = "self_standin_not_allowed"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "An employee cannot be their own standin"


class InactiveStandinNotAllowed(LeaveWorkflowError):
    kind = "inactive_standin_not_allowed"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "A deactivated employee cannot be assigned as standin"


class NotAnApprover(LeaveWorkflowError):
    kind = "not_an_approver"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not an approver for this leave"


class AlreadyDecided(LeaveWorkflowError):
    kind = "already_decided"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "You have already decided on this leave"


class ManagerOnlyAction(LeaveWorkflowError):
    kind = "manager_only_action"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Only the employee's manager can perform this action"


class InvalidLeaveState(LeaveWorkflowError):
    kind = "invalid_leave_state"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The leave is not in a state that allows this action"


class LeaveOverlap(LeaveWorkflowError):
    kind = "leave_overlap"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Leave request overlaps with an existing leave"


class InvalidDateRange(LeaveWorkflowError):
    kind = "invalid_date_range"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "date_start must be less than or equal to date_end"


class NotLeaveOwner(LeaveWorkflowError):
    kind = "not_leave_owner"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Only the employee who requested the leave can do this"


class LeaveNotFound(LeaveWorkflowError):
    kind = "leave_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Leave not found"


class EmployeeNotFound(LeaveWorkflowError):
    kind = "employee_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Employee not found"


class LeaveTypeNotFound(LeaveWorkflowError):
    kind = "leave_type_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Leave type not found"
