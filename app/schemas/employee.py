"""
Employee schemas
"""
from typing import Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict
from app.models.employee import Role


class EmployeeCreate(BaseModel):
    """Schema for creating an employee"""
    emp_code: str = Field(..., description="Employee code (unique)")
    name: str = Field(..., description="Employee name")
    email: Optional[str] = Field(None, description="Email address for notifications")
    role: Role = Field(default=Role.EMPLOYEE, description="Employee role")
    department_id: int = Field(..., description="Department ID (required)")
    reporting_manager_id: Optional[int] = Field(None, description="Escalation manager when the employee manages their own department")
    standin_id: Optional[int] = Field(None, description="Employee who co-approves this employee's leaves")
    auto_approve: bool = Field(False, description="Approve this employee's leaves without a decision")
    annual_allowance: Optional[int] = Field(None, ge=0, description="Annual allowance in working days")
    password: Optional[str] = Field(None, min_length=6, max_length=72, description="Employee password (optional)")

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        """Normalize and validate password"""
        if v is None:
            return None

        v = v.strip()
        if not v:
            return None

        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")

        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password cannot be longer than 72 bytes when encoded as UTF-8")

        return v


class StandinAssignRequest(BaseModel):
    """Schema for setting or clearing a standin"""
    standin_id: Optional[int] = Field(None, description="Standin employee ID, null to clear")


class EmployeeRef(BaseModel):
    """Minimal employee reference"""
    id: int
    emp_code: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class EmployeeOut(BaseModel):
    """Schema for employee output"""
    id: int
    emp_code: str
    name: str
    email: Optional[str] = None
    role: Role
    department_id: int
    reporting_manager_id: Optional[int] = None
    standin_id: Optional[int] = None
    auto_approve: bool
    annual_allowance: int
    active: bool

    model_config = ConfigDict(from_attributes=True)
