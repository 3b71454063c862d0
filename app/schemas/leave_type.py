"""
Leave type schemas
"""
from pydantic import BaseModel, Field, ConfigDict


class LeaveTypeCreate(BaseModel):
    """Schema for creating a leave type"""
    name: str = Field(..., min_length=1, description="Leave type name")
    auto_approve: bool = Field(False, description="Approve requests of this type without a decision")
    use_allowance: bool = Field(True, description="Count days of this type against the annual allowance")


class LeaveTypeOut(BaseModel):
    id: int
    name: str
    auto_approve: bool
    use_allowance: bool

    model_config = ConfigDict(from_attributes=True)
