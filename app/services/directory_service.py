"""
Directory lookups - managers, standins and active flags
"""
import logging
from typing import Optional, Set

from sqlalchemy.orm import Session

from app.core.exceptions import (
    EmployeeNotFound,
    InactiveStandinNotAllowed,
    NoManagerConfigured,
    SelfStandinNotAllowed,
)
from app.models.department import Department
from app.models.employee import Employee
from app.services.audit_service import log_audit

logger = logging.getLogger(__name__)


class DirectoryService:
    """Who manages whom, who stands in for whom, and who is still active"""

    def __init__(self, db: Session):
        self.db = db

    def get_employee(self, employee_id: int) -> Employee:
        employee = self.db.query(Employee).filter(Employee.id == employee_id).first()
        if not employee:
            raise EmployeeNotFound(f"Employee with id {employee_id} not found")
        return employee

    def get_manager(self, employee_id: int) -> int:
        """
        Resolve the manager responsible for an employee's leaves.

        The manager of the employee's department is used. When the employee
        manages that department themself, their reporting manager is used
        instead so nobody approves their own leave.

        Raises:
            NoManagerConfigured: If no active manager can be resolved
        """
        employee = self.get_employee(employee_id)
        department = self.db.query(Department).filter(Department.id == employee.department_id).first()

        manager_id = department.manager_id if department else None
        if manager_id == employee.id:
            manager_id = employee.reporting_manager_id

        if manager_id is None or manager_id == employee.id or not self.is_active(manager_id):
            raise NoManagerConfigured(f"No manager is configured for employee {employee.emp_code}")
        return manager_id

    def find_manager(self, employee_id: int) -> Optional[int]:
        """Same as get_manager but returns None instead of raising"""
        try:
            return self.get_manager(employee_id)
        except NoManagerConfigured:
            return None

    def get_standin(self, employee_id: int) -> Optional[int]:
        """Configured standin, or None when unset or no longer active"""
        employee = self.get_employee(employee_id)
        if employee.standin_id is None:
            return None
        if not self.is_active(employee.standin_id):
            logger.info(
                "Ignoring inactive standin: employee_id=%s standin_id=%s",
                employee_id, employee.standin_id,
            )
            return None
        return employee.standin_id

    def is_active(self, user_id: int) -> bool:
        row = self.db.query(Employee.active).filter(Employee.id == user_id).first()
        return bool(row and row[0])

    def inactive_among(self, user_ids) -> Set[int]:
        """Subset of user_ids that are deactivated"""
        ids = set(user_ids)
        if not ids:
            return set()
        rows = self.db.query(Employee.id).filter(Employee.id.in_(ids), Employee.active == False).all()  # noqa: E712
        return {row[0] for row in rows}

    def assign_standin(self, employee_id: int, standin_id: Optional[int], actor_id: int) -> Employee:
        """
        Set or clear an employee's standin.

        Raises:
            SelfStandinNotAllowed: If the employee would stand in for themself
            InactiveStandinNotAllowed: If the standin has been deactivated
            EmployeeNotFound: If either employee does not exist
        """
        employee = self.get_employee(employee_id)
        if standin_id is not None:
            if standin_id == employee.id:
                raise SelfStandinNotAllowed(f"Employee {employee.emp_code} cannot be their own standin")
            standin = self.get_employee(standin_id)
            if not standin.active:
                raise InactiveStandinNotAllowed(f"Employee {standin.emp_code} is inactive and cannot be a standin")

        before = employee.standin_id
        employee.standin_id = standin_id
        self.db.commit()
        self.db.refresh(employee)

        logger.info("standin assigned: employee_id=%s before=%s after=%s", employee_id, before, standin_id)
        log_audit(
            db=self.db,
            actor_id=actor_id,
            action="STANDIN_ASSIGN",
            entity_type="employees",
            entity_id=employee.id,
            meta={"before": before, "after": standin_id},
        )
        return employee
