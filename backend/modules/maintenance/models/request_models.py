# backend/modules/maintenance/models/request_models.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Float,
    Boolean,
    Text,
    Enum as SQLEnum,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from core.database import Base
from ..enums import RequestStage, RequestType


class MaintenanceRequest(Base):
    """Maintenance request routed through the NEW -> IN_PROGRESS -> REPAIRED/SCRAP workflow"""

    __tablename__ = "maintenance_requests"

    id = Column(Integer, primary_key=True, index=True)
    subject = Column(String(300), nullable=False)
    description = Column(Text, nullable=False, default="")

    # Write-once at creation
    request_type = Column(SQLEnum(RequestType), nullable=False)
    equipment_id = Column(
        Integer,
        ForeignKey("equipment.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    maintenance_team_id = Column(
        Integer, ForeignKey("maintenance_teams.id"), nullable=False, index=True
    )
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Lifecycle-managed fields
    stage = Column(
        SQLEnum(RequestStage), nullable=False, default=RequestStage.NEW, index=True
    )
    assigned_technician_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True
    )
    duration_hours = Column(Float)

    scheduled_date = Column(DateTime, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    equipment = relationship("Equipment", back_populates="maintenance_requests")
    maintenance_team = relationship(
        "MaintenanceTeam", back_populates="maintenance_requests"
    )
    assigned_technician = relationship(
        "User", foreign_keys=[assigned_technician_id]
    )
    created_by = relationship("User", foreign_keys=[created_by_id])
    notes = relationship(
        "MaintenanceNote",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="MaintenanceNote.id",
    )

    __table_args__ = (
        Index("idx_request_stage_scheduled", "stage", "scheduled_date"),
        Index("idx_request_team_stage", "maintenance_team_id", "stage"),
    )


class MaintenanceNote(Base):
    """Append-only note on a maintenance request; system notes have no author"""

    __tablename__ = "maintenance_notes"

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(
        Integer,
        ForeignKey("maintenance_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content = Column(Text, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    is_system = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    request = relationship("MaintenanceRequest", back_populates="notes")
    user = relationship("User")
