# backend/modules/maintenance/services/organization_service.py

from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from core.exceptions import ConflictError, NotFoundError, ValidationError
from ..enums import UserRole
from ..models import Department, MaintenanceTeam, User
from ..schemas import DepartmentCreate, TeamCreate, TeamUpdate, UserCreate

logger = logging.getLogger(__name__)


class OrganizationService:
    """Departments, users and maintenance teams"""

    def __init__(self, db: Session):
        self.db = db

    # Departments
    def create_department(self, department_data: DepartmentCreate) -> Department:
        existing = (
            self.db.query(Department)
            .filter(Department.name == department_data.name)
            .first()
        )
        if existing:
            raise ConflictError(f"Department '{department_data.name}' already exists")

        department = Department(name=department_data.name)
        self.db.add(department)
        self._commit("create department")
        self.db.refresh(department)

        logger.info("Department %s created", department.id)
        return department

    def list_departments(self) -> List[Department]:
        return (
            self.db.query(Department)
            .options(selectinload(Department.users), selectinload(Department.equipment))
            .order_by(Department.name.asc())
            .all()
        )

    # Users
    def create_user(self, user_data: UserCreate) -> User:
        email = user_data.email.lower()
        if self.db.query(User).filter(User.email == email).first():
            raise ConflictError(f"User with email {email} already exists")

        if user_data.department_id is not None and not self.db.get(
            Department, user_data.department_id
        ):
            raise NotFoundError(f"Department with ID {user_data.department_id} not found")

        user = User(
            name=user_data.name.strip(),
            email=email,
            role=user_data.role,
            avatar_url=user_data.avatar_url,
            department_id=user_data.department_id,
        )
        self.db.add(user)
        self._commit("create user")
        self.db.refresh(user)

        logger.info("User %s created with role %s", user.id, user.role.value)
        return user

    def get_user(self, user_id: int) -> User:
        user = (
            self.db.query(User)
            .options(selectinload(User.maintenance_teams))
            .filter(User.id == user_id)
            .first()
        )
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    def list_users(
        self, role: Optional[UserRole] = None, team_id: Optional[int] = None
    ) -> List[User]:
        """List users, optionally only one role or one team's technicians"""
        query = self.db.query(User).options(selectinload(User.maintenance_teams))

        if role:
            query = query.filter(User.role == role)

        if team_id:
            query = query.filter(User.maintenance_teams.any(MaintenanceTeam.id == team_id))

        return query.order_by(User.name.asc(), User.id.asc()).all()

    # Teams
    def create_team(self, team_data: TeamCreate) -> MaintenanceTeam:
        name = team_data.name.strip()
        self._ensure_unique_team_name(name)

        team = MaintenanceTeam(
            name=name,
            specialization=team_data.specialization,
            technicians=self._load_technicians(team_data.technician_ids),
        )
        self.db.add(team)
        self._commit("create team")
        self.db.refresh(team)

        logger.info(
            "Maintenance team %s created with %d technicians",
            team.id,
            len(team.technicians),
        )
        return team

    def get_team(self, team_id: int) -> MaintenanceTeam:
        team = (
            self.db.query(MaintenanceTeam)
            .options(
                selectinload(MaintenanceTeam.technicians),
                selectinload(MaintenanceTeam.equipment),
                selectinload(MaintenanceTeam.maintenance_requests),
            )
            .filter(MaintenanceTeam.id == team_id)
            .first()
        )
        if not team:
            raise NotFoundError(f"Maintenance team with ID {team_id} not found")
        return team

    def list_teams(self) -> List[MaintenanceTeam]:
        return (
            self.db.query(MaintenanceTeam)
            .options(
                selectinload(MaintenanceTeam.technicians),
                selectinload(MaintenanceTeam.equipment),
                selectinload(MaintenanceTeam.maintenance_requests),
            )
            .order_by(MaintenanceTeam.name.asc())
            .all()
        )

    def update_team(self, team_id: int, update_data: TeamUpdate) -> MaintenanceTeam:
        """Update a team; ``technician_ids`` replaces the whole roster"""
        team = self.get_team(team_id)
        update_dict = update_data.model_dump(exclude_unset=True)

        if "name" in update_dict:
            name = (update_dict["name"] or "").strip()
            if not name:
                raise ValidationError("Team name cannot be empty")
            if name != team.name:
                self._ensure_unique_team_name(name, exclude_id=team_id)
            team.name = name

        if "specialization" in update_dict:
            team.specialization = update_dict["specialization"]

        if update_dict.get("technician_ids") is not None:
            team.technicians = self._load_technicians(update_dict["technician_ids"])

        self._commit("update team")
        self.db.refresh(team)
        return team

    def delete_team(self, team_id: int) -> None:
        team = self.get_team(team_id)
        if team.equipment or team.maintenance_requests:
            raise ConflictError(
                "Cannot delete a team that still services equipment or requests"
            )

        self.db.delete(team)
        self._commit("delete team")
        logger.info("Maintenance team %s deleted", team_id)

    def _ensure_unique_team_name(self, name: str, exclude_id: int = None) -> None:
        query = self.db.query(MaintenanceTeam).filter(MaintenanceTeam.name == name)
        if exclude_id is not None:
            query = query.filter(MaintenanceTeam.id != exclude_id)
        if query.first():
            raise ConflictError(f"Maintenance team '{name}' already exists")

    def _load_technicians(self, technician_ids: List[int]) -> List[User]:
        """Resolve roster ids; every id must belong to a technician"""
        unique_ids = list(dict.fromkeys(technician_ids))
        if not unique_ids:
            return []

        users = self.db.query(User).filter(User.id.in_(unique_ids)).all()
        by_id = {user.id: user for user in users}

        missing = [user_id for user_id in unique_ids if user_id not in by_id]
        if missing:
            raise ValidationError(f"Unknown technician ids: {missing}")

        not_technicians = [
            user_id
            for user_id in unique_ids
            if by_id[user_id].role != UserRole.TECHNICIAN
        ]
        if not_technicians:
            raise ValidationError(
                f"Only technicians can join a maintenance team: {not_technicians}"
            )

        return [by_id[user_id] for user_id in unique_ids]

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Integrity error during %s: %s", action, e.orig)
            raise ConflictError(f"Could not {action}: conflicting data") from e
