"""
Database initialization helpers
"""
import logging
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.security import hash_password
from app.models.department import Department
from app.models.employee import Employee, Role

logger = logging.getLogger(__name__)

ADMIN_DEPARTMENT_NAME = "Administration"


def bootstrap_initial_admin(db: Session) -> None:
    """
    Create the Administration department and an initial admin if no admin exists

    Credentials come from INITIAL_ADMIN_EMP_CODE / INITIAL_ADMIN_PASSWORD.
    """
    admin_exists = db.query(Employee).filter(Employee.role == Role.ADMIN.value).first()
    if admin_exists:
        logger.info("Admin user already exists, skipping initial bootstrap")
        return

    department = db.query(Department).filter(Department.name == ADMIN_DEPARTMENT_NAME).first()
    if not department:
        department = Department(name=ADMIN_DEPARTMENT_NAME, active=True)
        db.add(department)
        db.flush()
        logger.info("Created department: %s", ADMIN_DEPARTMENT_NAME)

    admin = Employee(
        emp_code=settings.INITIAL_ADMIN_EMP_CODE,
        name="System Administrator",
        role=Role.ADMIN.value,
        department_id=department.id,
        password_hash=hash_password(settings.INITIAL_ADMIN_PASSWORD),
        annual_allowance=settings.DEFAULT_ANNUAL_ALLOWANCE,
        active=True,
    )
    db.add(admin)
    db.commit()
    logger.info("Initial admin user created: emp_code=%s", admin.emp_code)
