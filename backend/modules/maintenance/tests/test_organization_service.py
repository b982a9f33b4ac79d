# backend/modules/maintenance/tests/test_organization_service.py

import pytest

from core.exceptions import ConflictError, NotFoundError, ValidationError
from modules.maintenance.enums import UserRole
from modules.maintenance.schemas import (
    DepartmentCreate,
    TeamCreate,
    TeamUpdate,
    UserCreate,
)
from modules.maintenance.services.organization_service import OrganizationService


@pytest.fixture
def organization_service(db_session):
    return OrganizationService(db_session)


class TestDepartmentsAndUsers:
    def test_create_department(self, organization_service):
        department = organization_service.create_department(DepartmentCreate(name=" IT "))
        assert department.name == "IT"

    def test_duplicate_department(self, organization_service, department):
        with pytest.raises(ConflictError):
            organization_service.create_department(DepartmentCreate(name=department.name))

    def test_department_counts(self, organization_service, equipment, alice):
        departments = organization_service.list_departments()

        assert len(departments) == 1
        # Alice and Bob are both in Production
        assert departments[0].user_count == 2
        assert departments[0].equipment_count == 1

    def test_create_user(self, organization_service, department):
        user = organization_service.create_user(
            UserCreate(
                name="Tom Tech",
                email="Tom@Example.com",
                role=UserRole.TECHNICIAN,
                department_id=department.id,
            )
        )
        assert user.email == "tom@example.com"
        assert user.role == UserRole.TECHNICIAN

    def test_duplicate_email(self, organization_service, alice):
        with pytest.raises(ConflictError):
            organization_service.create_user(UserCreate(name="Other", email=alice.email))

    def test_unknown_department(self, organization_service):
        with pytest.raises(NotFoundError):
            organization_service.create_user(
                UserCreate(name="Other", email="other@example.com", department_id=999)
            )

    def test_list_users_by_role_and_team(self, organization_service, team, alice, manager):
        technicians = organization_service.list_users(role=UserRole.TECHNICIAN)
        assert [user.name for user in technicians] == ["Alice Tech", "Bob Tech"]

        members = organization_service.list_users(team_id=team.id)
        assert [user.id for user in members] == [alice.id]


class TestTeams:
    def test_create_team(self, organization_service, alice, bob):
        team = organization_service.create_team(
            TeamCreate(name="Night shift", technician_ids=[bob.id, alice.id, bob.id])
        )

        assert team.technician_ids == [alice.id, bob.id]

    def test_roster_must_be_technicians(self, organization_service, employee):
        with pytest.raises(ValidationError):
            organization_service.create_team(
                TeamCreate(name="Helpers", technician_ids=[employee.id])
            )

    def test_roster_ids_must_exist(self, organization_service):
        with pytest.raises(ValidationError):
            organization_service.create_team(TeamCreate(name="Ghosts", technician_ids=[999]))

    def test_duplicate_team_name(self, organization_service, team):
        with pytest.raises(ConflictError):
            organization_service.create_team(TeamCreate(name=team.name))

    def test_update_replaces_roster(self, organization_service, team, bob):
        updated = organization_service.update_team(
            team.id, TeamUpdate(technician_ids=[bob.id])
        )
        assert updated.technician_ids == [bob.id]

    def test_update_without_roster_keeps_it(self, organization_service, team, alice):
        updated = organization_service.update_team(
            team.id, TeamUpdate(specialization="Milling")
        )
        assert updated.specialization == "Milling"
        assert updated.technician_ids == [alice.id]

    def test_team_in_use_cannot_be_deleted(self, organization_service, team, equipment):
        with pytest.raises(ConflictError):
            organization_service.delete_team(team.id)

    def test_delete_unused_team(self, organization_service, team):
        organization_service.delete_team(team.id)

        with pytest.raises(NotFoundError):
            organization_service.get_team(team.id)
