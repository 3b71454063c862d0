"""
Leave schemas
"""
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator
from app.models.leave import ApproverRole, DecisionStatus, LeaveStatus
from app.schemas.employee import EmployeeRef
from app.schemas.leave_type import LeaveTypeOut


class LeaveSubmitRequest(BaseModel):
    """Schema for submitting a leave request"""
    leave_type_id: int = Field(..., description="Leave type ID")
    date_start: date = Field(..., description="First day of leave")
    date_end: date = Field(..., description="Last day of leave (inclusive)")
    comment: Optional[str] = Field(None, description="Comment for the approvers")

    @model_validator(mode="after")
    def check_dates(self) -> "LeaveSubmitRequest":
        if self.date_start > self.date_end:
            raise ValueError("date_start must be less than or equal to date_end")
        return self


class DecisionRequest(BaseModel):
    """Schema for approve / reject / revoke actions"""
    comment: Optional[str] = Field(None, description="Optional comment")


class ApprovalRecordOut(BaseModel):
    id: int
    approver_id: int
    approver_role: ApproverRole
    decision_status: DecisionStatus
    decided_at: Optional[datetime] = None
    comment: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class LeaveOut(BaseModel):
    """Schema for leave output, approval records included"""
    id: int
    employee_id: int
    employee: Optional[EmployeeRef] = None
    leave_type_id: int
    leave_type: Optional[LeaveTypeOut] = None
    date_start: date
    date_end: date
    days: int
    status: LeaveStatus
    employee_comment: Optional[str] = None
    auto_approved: bool
    last_actor_id: Optional[int] = None
    decided_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    approval_records: List[ApprovalRecordOut] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class LeaveListResponse(BaseModel):
    items: List[LeaveOut]
    total: int


class AllowanceOut(BaseModel):
    year: int
    allowance: int
    used: int
    pending: int
    remaining: int
