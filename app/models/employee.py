"""
Employee model
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from app.db.base import Base


class Role(str, enum.Enum):
    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    emp_code = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    role = Column(String, nullable=False, default=Role.EMPLOYEE.value)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False)
    # Escalation target when the employee manages their own department
    reporting_manager_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
    # Plain id into this table; never an owning reference, A->B->A is legal data
    standin_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True)
    auto_approve = Column(Boolean, nullable=False, default=False)
    annual_allowance = Column(Integer, nullable=False, default=20)
    password_hash = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    # Relationships
    department = relationship("Department", backref="employees")
    reporting_manager = relationship("Employee", foreign_keys=[reporting_manager_id], remote_side=[id])
    standin = relationship("Employee", foreign_keys=[standin_id], remote_side=[id])
    managed_departments = relationship("ManagerDepartment", back_populates="manager", cascade="all, delete-orphan")
    leaves = relationship("Leave", foreign_keys="Leave.employee_id", back_populates="employee")

    __table_args__ = (
        CheckConstraint("standin_id IS NULL OR standin_id != id", name="check_standin_not_self"),
    )
