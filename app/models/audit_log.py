"""
Audit log model
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from app.db.base import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    actor_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    action = Column(String, nullable=False)  # e.g. "LEAVE_SUBMIT", "LEAVE_DECIDE", "STANDIN_ASSIGN"
    entity_type = Column(String, nullable=False)  # e.g. "leaves", "employees"
    entity_id = Column(Integer, nullable=True)
    meta_json = Column(JSON, nullable=True)
    # Set explicitly by log_audit; SQLite server defaults are not timezone-aware
    created_at = Column(DateTime(timezone=True), nullable=False)
