"""
Pytest configuration and fixtures
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.engine import Engine
from app.main import app
from app.db.base import Base
from app.core.deps import get_db
from app.core.security import hash_password
from app.services.notification_service import Notifier, get_notifier

# Import all models to ensure they're registered with Base.metadata
from app.models import (
    Department,
    Employee,
    ManagerDepartment,
    LeaveType,
    Role,
)  # noqa


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "secret123"


class RecordingSender:
    """Notification sender that keeps every delivery in memory"""

    def __init__(self):
        self.sent = []

    def send(self, kind, recipient_id, payload):
        self.sent.append((kind, recipient_id, payload))

    def kinds_for(self, recipient_id):
        return [kind for kind, recipient, _ in self.sent if recipient == recipient_id]

    def of_kind(self, kind):
        return [(recipient, payload) for k, recipient, payload in self.sent if k == kind]

    def clear(self):
        self.sent.clear()


class FailingSender:
    """Notification sender whose transport is down"""

    def __init__(self):
        self.attempts = 0

    def send(self, kind, recipient_id, payload):
        self.attempts += 1
        raise ConnectionError("mail relay unavailable")


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def notifier(sender):
    return Notifier(sender, enabled=True)


@pytest.fixture
def failing_sender():
    return FailingSender()


@pytest.fixture(scope="function")
def client(db, notifier):
    """Test client fixture with database and notifier overrides"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def department(db: Session):
    """Create a test department"""
    dept = Department(name="IT", active=True)
    db.add(dept)
    db.commit()
    db.refresh(dept)
    return dept


@pytest.fixture
def make_employee(db: Session, department):
    """Factory creating active employees with a known password"""
    def _make(emp_code, role=Role.EMPLOYEE, department_id=None, **kwargs):
        emp = Employee(
            emp_code=emp_code,
            name=kwargs.pop("name", emp_code.title()),
            role=role.value,
            department_id=department_id or department.id,
            password_hash=hash_password(DEFAULT_PASSWORD),
            active=True,
            **kwargs
        )
        db.add(emp)
        db.commit()
        db.refresh(emp)
        return emp
    return _make


@pytest.fixture
def manager(db: Session, department, make_employee):
    """Create the department manager"""
    mgr = make_employee("MGR001", role=Role.MANAGER, name="Manager")
    db.add(ManagerDepartment(manager_id=mgr.id, department_id=department.id))
    db.commit()
    db.refresh(department)
    return mgr


@pytest.fixture
def standin(make_employee, manager):
    return make_employee("STD001", name="Standin")


@pytest.fixture
def employee(make_employee, manager):
    """Employee without a standin"""
    return make_employee("EMP001", name="Employee")


@pytest.fixture
def employee_with_standin(db: Session, make_employee, manager, standin):
    emp = make_employee("EMP002", name="Covered Employee")
    emp.standin_id = standin.id
    db.commit()
    db.refresh(emp)
    return emp


@pytest.fixture
def admin(make_employee):
    return make_employee("ADM001", role=Role.ADMIN, name="Admin")


@pytest.fixture
def leave_type(db: Session):
    lt = LeaveType(name="Vacation", auto_approve=False, use_allowance=True, active=True)
    db.add(lt)
    db.commit()
    db.refresh(lt)
    return lt


@pytest.fixture
def auto_leave_type(db: Session):
    lt = LeaveType(name="Blood Donation", auto_approve=True, use_allowance=False, active=True)
    db.add(lt)
    db.commit()
    db.refresh(lt)
    return lt


@pytest.fixture
def auth_headers(client):
    """Log in through the API and return bearer headers"""
    def _headers(emp_code, password=DEFAULT_PASSWORD):
        response = client.post("/api/v1/auth/login", json={"emp_code": emp_code, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _headers
