"""
Department manager assignment model

A department has at most one manager; the manager approves leaves of its members.
"""
from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import Base


class ManagerDepartment(Base):
    __tablename__ = "manager_departments"

    id = Column(Integer, primary_key=True, index=True)
    manager_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        UniqueConstraint("department_id", name="uq_manager_departments_department"),
    )

    # Relationships
    manager = relationship("Employee", back_populates="managed_departments")
    department = relationship("Department", back_populates="manager_assignment")
