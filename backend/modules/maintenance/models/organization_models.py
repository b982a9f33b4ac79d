# backend/modules/maintenance/models/organization_models.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Enum as SQLEnum,
    ForeignKey,
    Table,
)
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import TimestampMixin
from ..enums import UserRole


team_technicians = Table(
    "maintenance_team_technicians",
    Base.metadata,
    Column(
        "team_id",
        Integer,
        ForeignKey("maintenance_teams.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Department(Base, TimestampMixin):
    """Organizational unit owning users and equipment"""

    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, unique=True)

    users = relationship("User", back_populates="department")
    equipment = relationship("Equipment", back_populates="department")

    @property
    def user_count(self):
        return len(self.users)

    @property
    def equipment_count(self):
        return len(self.equipment)


class User(Base, TimestampMixin):
    """Person who can raise, work on, or supervise maintenance requests"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.EMPLOYEE)
    avatar_url = Column(String(500))
    department_id = Column(
        Integer, ForeignKey("departments.id", ondelete="SET NULL"), index=True
    )

    department = relationship("Department", back_populates="users")
    maintenance_teams = relationship(
        "MaintenanceTeam", secondary=team_technicians, back_populates="technicians"
    )

    @property
    def team_ids(self):
        return [team.id for team in self.maintenance_teams]


class MaintenanceTeam(Base, TimestampMixin):
    """Group of technicians servicing a set of equipment"""

    __tablename__ = "maintenance_teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, unique=True)
    specialization = Column(Text)

    technicians = relationship(
        "User",
        secondary=team_technicians,
        back_populates="maintenance_teams",
        order_by="User.name",
    )
    # Equipment.maintenance_team is the owning side
    equipment = relationship("Equipment", back_populates="maintenance_team")
    maintenance_requests = relationship(
        "MaintenanceRequest", back_populates="maintenance_team"
    )

    @property
    def technician_ids(self):
        return [technician.id for technician in self.technicians]

    @property
    def equipment_count(self):
        return len(self.equipment)

    @property
    def request_count(self):
        return len(self.maintenance_requests)
