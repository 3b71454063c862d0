"""
Leave models
"""
from sqlalchemy import (
    Column,
    Integer,
    Date,
    DateTime,
    ForeignKey,
    String,
    Text,
    Enum as SQLEnum,
    Boolean,
    UniqueConstraint,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import text
import enum
from app.db.base import Base


class LeaveStatus(str, enum.Enum):
    NEW = "NEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PENDED_REVOKE = "PENDED_REVOKE"
    CANCELED = "CANCELED"


class ApproverRole(str, enum.Enum):
    MANAGER = "MANAGER"
    STANDIN = "STANDIN"


class DecisionStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Decision(str, enum.Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"


# Statuses that occupy the employee's calendar
ACTIVE_LEAVE_STATUSES = (LeaveStatus.NEW, LeaveStatus.APPROVED, LeaveStatus.PENDED_REVOKE)


class LeaveType(Base):
    __tablename__ = "leave_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    auto_approve = Column(Boolean, nullable=False, default=False)
    use_allowance = Column(Boolean, nullable=False, default=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"), nullable=False)


class Leave(Base):
    __tablename__ = "leaves"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id"), nullable=False)
    date_start = Column(Date, nullable=False)
    date_end = Column(Date, nullable=False)
    status = Column(SQLEnum(LeaveStatus), nullable=False, server_default=text("'NEW'"))
    days = Column(Integer, nullable=False, default=0)
    employee_comment = Column(Text, nullable=True)
    auto_approved = Column(Boolean, nullable=False, default=False)
    # Legacy "who acted last"; kept up to date for older reports
    last_actor_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
    decided_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    # Relationships
    employee = relationship("Employee", foreign_keys=[employee_id], back_populates="leaves")
    leave_type = relationship("LeaveType")
    last_actor = relationship("Employee", foreign_keys=[last_actor_id])
    approval_records = relationship(
        "LeaveApprovalRecord",
        back_populates="leave",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="LeaveApprovalRecord.id",
    )

    __table_args__ = (
        Index("ix_leaves_employee_dates", "employee_id", "date_start", "date_end"),
        CheckConstraint("date_start <= date_end", name="check_date_start_le_date_end"),
    )


class LeaveApprovalRecord(Base):
    """One approver's decision on one leave"""
    __tablename__ = "leave_approval_records"

    id = Column(Integer, primary_key=True, index=True)
    leave_id = Column(Integer, ForeignKey("leaves.id", ondelete="CASCADE"), nullable=False, index=True)
    approver_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    approver_role = Column(SQLEnum(ApproverRole), nullable=False)
    decision_status = Column(SQLEnum(DecisionStatus), nullable=False, default=DecisionStatus.PENDING)
    decided_at = Column(DateTime(timezone=True), nullable=True)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"), nullable=False)

    # Relationships
    leave = relationship("Leave", back_populates="approval_records")
    approver = relationship("Employee", foreign_keys=[approver_id])

    __table_args__ = (
        UniqueConstraint("leave_id", "approver_role", name="uq_leave_approval_records_leave_role"),
    )
