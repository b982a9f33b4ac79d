# backend/modules/maintenance/tests/conftest.py

import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.auth import create_access_token
from core.database import Base, enable_sqlite_foreign_keys, get_db
from modules.maintenance.enums import EquipmentCategory, UserRole
from modules.maintenance.models import Department, Equipment, MaintenanceTeam, User
from modules.maintenance.schemas import Actor, MaintenanceRequestCreate
from modules.maintenance.services.lifecycle_service import RequestLifecycleService
from modules.maintenance.services.repository import SQLAlchemyMaintenanceRepository

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """Fresh in-memory database per test"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    from app.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def department(db_session):
    department = Department(name="Production")
    db_session.add(department)
    db_session.commit()
    return department


def _create_user(db_session, name, email, role, department):
    user = User(name=name, email=email, role=role, department_id=department.id)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def manager(db_session, department):
    return _create_user(db_session, "Maria Manager", "maria@example.com", UserRole.MANAGER, department)


@pytest.fixture
def alice(db_session, department):
    return _create_user(db_session, "Alice Tech", "alice@example.com", UserRole.TECHNICIAN, department)


@pytest.fixture
def bob(db_session, department):
    return _create_user(db_session, "Bob Tech", "bob@example.com", UserRole.TECHNICIAN, department)


@pytest.fixture
def employee(db_session, department):
    return _create_user(db_session, "Eve Employee", "eve@example.com", UserRole.EMPLOYEE, department)


@pytest.fixture
def team(db_session, alice, bob):
    """Mechanics team with Alice only; Bob belongs to another team"""
    mechanics = MaintenanceTeam(name="Mechanics", specialization="Lathes", technicians=[alice])
    electricians = MaintenanceTeam(name="Electricians", technicians=[bob])
    db_session.add_all([mechanics, electricians])
    db_session.commit()
    return mechanics


@pytest.fixture
def equipment(db_session, department, team):
    item = Equipment(
        name="CNC Lathe",
        serial_number="CNC-001",
        category=EquipmentCategory.MACHINE,
        location="Hall A",
        purchase_date=datetime(2022, 1, 15),
        department_id=department.id,
        maintenance_team_id=team.id,
    )
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture
def service(db_session):
    return RequestLifecycleService(
        SQLAlchemyMaintenanceRepository(db_session), clock=lambda: FIXED_NOW
    )


@pytest.fixture
def actor_for():
    """Build an Actor from a user row"""

    def _actor(user):
        return Actor(id=user.id, role=user.role)

    return _actor


@pytest.fixture
def new_request(service, equipment, employee):
    """A corrective request in stage NEW raised by the employee"""
    return service.create_request(
        MaintenanceRequestCreate(subject="Spindle vibrates", equipment_id=equipment.id),
        created_by_id=employee.id,
    )


@pytest.fixture
def auth_headers():
    """Factory for bearer headers of a given user"""

    def _headers(user):
        token = create_access_token(user.id, user.role.value, email=user.email)
        return {"Authorization": f"Bearer {token}"}

    return _headers
