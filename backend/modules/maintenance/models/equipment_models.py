# backend/modules/maintenance/models/equipment_models.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Boolean,
    Enum as SQLEnum,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import TimestampMixin
from ..enums import EquipmentCategory


class Equipment(Base, TimestampMixin):
    """Equipment item tracked for maintenance"""

    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    serial_number = Column(String(100), nullable=False, unique=True, index=True)
    category = Column(SQLEnum(EquipmentCategory), nullable=False)
    location = Column(String(200), nullable=False)
    purchase_date = Column(DateTime, nullable=False)
    warranty_end_date = Column(DateTime)

    department_id = Column(
        Integer, ForeignKey("departments.id"), nullable=False, index=True
    )
    assigned_employee_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True
    )
    maintenance_team_id = Column(
        Integer, ForeignKey("maintenance_teams.id"), nullable=False, index=True
    )

    # Monotonic: once scrapped, never reverts
    is_scrapped = Column(Boolean, default=False, nullable=False)

    # Relationships
    department = relationship("Department", back_populates="equipment")
    assigned_employee = relationship("User")
    maintenance_team = relationship("MaintenanceTeam", back_populates="equipment")
    maintenance_requests = relationship(
        "MaintenanceRequest",
        back_populates="equipment",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_equipment_category_scrapped", "category", "is_scrapped"),
    )
