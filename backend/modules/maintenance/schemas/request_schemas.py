# backend/modules/maintenance/schemas/request_schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime

from ..enums import RequestStage, RequestType, UserRole
from ..services.overdue import is_overdue, to_naive_utc
from .equipment_schemas import EquipmentSummary
from .organization_schemas import UserSummary, TeamSummary


class Actor(BaseModel):
    """Identity and role of whoever is performing an operation"""

    id: int
    role: UserRole

    model_config = ConfigDict(frozen=True)


class MaintenanceRequestCreate(BaseModel):
    """Schema for creating a maintenance request.

    The maintenance team is always taken from the equipment and the creator
    from the authenticated user, so neither is accepted here.
    """

    subject: str = Field(..., min_length=1, max_length=300)
    request_type: RequestType = RequestType.CORRECTIVE
    equipment_id: int
    scheduled_date: Optional[datetime] = None
    description: str = Field("", max_length=5000)

    @field_validator("subject", mode="after")
    def validate_subject(cls, v):
        if not v.strip():
            raise ValueError("Cannot be empty or whitespace only")
        return v.strip()

    @field_validator("scheduled_date", mode="after")
    def normalize_scheduled_date(cls, v):
        return to_naive_utc(v)


class TransitionPayload(BaseModel):
    """Extra data some transitions need"""

    assigned_technician_id: Optional[int] = None
    duration_hours: Optional[float] = None

    @field_validator("duration_hours", mode="before")
    def reject_boolean_duration(cls, v):
        # bool is an int subclass and would coerce to 1.0 or 0.0
        if isinstance(v, bool):
            raise ValueError("Duration must be a number of hours")
        return v


class TransitionRequest(TransitionPayload):
    target_stage: RequestStage


class RequestDetailsUpdate(BaseModel):
    """Fields that may be edited outside the lifecycle"""

    subject: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = Field(None, max_length=5000)
    scheduled_date: Optional[datetime] = None

    @field_validator("scheduled_date", mode="after")
    def normalize_scheduled_date(cls, v):
        return to_naive_utc(v)


class NoteCreate(BaseModel):
    content: str = Field(..., max_length=5000)


class RequestSearchParams(BaseModel):
    """Search parameters for maintenance requests"""

    equipment_id: Optional[int] = None
    maintenance_team_id: Optional[int] = None
    stage: Optional[RequestStage] = None
    request_type: Optional[RequestType] = None
    scheduled_from: Optional[datetime] = None
    scheduled_to: Optional[datetime] = None

    @field_validator("scheduled_from", "scheduled_to", mode="after")
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class MaintenanceNote(BaseModel):
    id: int
    request_id: int
    content: str
    user_id: Optional[int] = None
    user: Optional[UserSummary] = None
    is_system: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MaintenanceTeamWithTechnicians(TeamSummary):
    technicians: List[UserSummary] = Field(default_factory=list)


class MaintenanceRequest(BaseModel):
    """Schema for maintenance request response"""

    id: int
    subject: str
    description: str
    request_type: RequestType
    stage: RequestStage
    equipment_id: int
    maintenance_team_id: int
    assigned_technician_id: Optional[int] = None
    created_by_id: int
    scheduled_date: Optional[datetime] = None
    duration_hours: Optional[float] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    equipment: EquipmentSummary
    maintenance_team: MaintenanceTeamWithTechnicians
    assigned_technician: Optional[UserSummary] = None
    created_by: UserSummary
    notes: List[MaintenanceNote] = Field(default_factory=list)

    is_overdue: bool = False

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_orm_request(cls, request, now: datetime) -> "MaintenanceRequest":
        data = cls.model_validate(request)
        data.is_overdue = is_overdue(request.scheduled_date, request.stage, now)
        return data


class TransitionOptions(BaseModel):
    request_id: int
    stage: RequestStage
    available_transitions: List[RequestStage]
