"""
Department schemas
"""
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class DepartmentCreate(BaseModel):
    """Schema for creating a department"""
    name: str = Field(..., min_length=1, description="Department name (unique, case-insensitive)")
    active: bool = Field(default=True, description="Department active status")


class AssignManagerRequest(BaseModel):
    """Schema for assigning a department manager"""
    manager_id: Optional[int] = Field(None, description="Employee ID of the manager, null to clear")


class DepartmentOut(BaseModel):
    """Schema for department output"""
    id: int
    name: str
    active: bool
    manager_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)
