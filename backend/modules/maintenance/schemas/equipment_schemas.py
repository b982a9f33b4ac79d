# backend/modules/maintenance/schemas/equipment_schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime

from ..enums import EquipmentCategory
from ..services.overdue import to_naive_utc
from .organization_schemas import TeamSummary, UserSummary


class EquipmentBase(BaseModel):
    """Base equipment schema with common fields"""

    name: str = Field(..., min_length=1, max_length=200, description="Equipment name")
    serial_number: str = Field(..., min_length=1, max_length=100)
    category: EquipmentCategory
    location: str = Field(..., min_length=1, max_length=200)

    @field_validator("name", "serial_number", "location", mode="after")
    def validate_not_empty(cls, v):
        if not v.strip():
            raise ValueError("Cannot be empty or whitespace only")
        return v.strip()


class EquipmentCreate(EquipmentBase):
    """Schema for creating equipment"""

    department_id: int
    maintenance_team_id: int
    assigned_employee_id: Optional[int] = None
    purchase_date: datetime
    warranty_end_date: Optional[datetime] = None

    @field_validator("purchase_date", "warranty_end_date", mode="after")
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    @model_validator(mode="after")
    def validate_dates(self):
        if self.warranty_end_date and self.warranty_end_date < self.purchase_date:
            raise ValueError("Warranty end date must be after purchase date")
        return self


class EquipmentUpdate(BaseModel):
    """Schema for updating equipment"""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    serial_number: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[EquipmentCategory] = None
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    department_id: Optional[int] = None
    maintenance_team_id: Optional[int] = None
    assigned_employee_id: Optional[int] = None
    purchase_date: Optional[datetime] = None
    warranty_end_date: Optional[datetime] = None
    is_scrapped: Optional[bool] = None

    @field_validator("purchase_date", "warranty_end_date", mode="after")
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class EquipmentSearchParams(BaseModel):
    """Search parameters for equipment"""

    department_id: Optional[int] = None
    assigned_employee_id: Optional[int] = None
    category: Optional[EquipmentCategory] = None
    include_scrapped: bool = False


class EquipmentSummary(BaseModel):
    id: int
    name: str
    serial_number: str
    category: EquipmentCategory
    is_scrapped: bool

    model_config = ConfigDict(from_attributes=True)


class Equipment(EquipmentSummary):
    """Schema for equipment response"""

    location: str
    purchase_date: datetime
    warranty_end_date: Optional[datetime] = None
    department_id: int
    maintenance_team_id: int
    assigned_employee_id: Optional[int] = None
    maintenance_team: Optional[TeamSummary] = None
    assigned_employee: Optional[UserSummary] = None
    open_request_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
