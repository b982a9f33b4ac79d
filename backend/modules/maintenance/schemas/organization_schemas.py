# backend/modules/maintenance/schemas/organization_schemas.py

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import List, Optional

from ..enums import UserRole


class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)

    @field_validator("name", mode="after")
    def validate_not_empty(cls, v):
        if not v.strip():
            raise ValueError("Cannot be empty or whitespace only")
        return v.strip()


class Department(BaseModel):
    id: int
    name: str
    user_count: int = 0
    equipment_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    role: UserRole = UserRole.EMPLOYEE
    avatar_url: Optional[str] = Field(None, max_length=500)
    department_id: Optional[int] = None


class UserSummary(BaseModel):
    """Compact user representation embedded in other responses"""

    id: int
    name: str
    email: str
    role: UserRole
    avatar_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class User(UserSummary):
    department_id: Optional[int] = None
    team_ids: List[int] = Field(default_factory=list)


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    specialization: Optional[str] = Field(None, max_length=1000)
    technician_ids: List[int] = Field(default_factory=list)


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    specialization: Optional[str] = Field(None, max_length=1000)
    # Replaces the whole roster when given
    technician_ids: Optional[List[int]] = None


class TeamSummary(BaseModel):
    id: int
    name: str
    specialization: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class Team(TeamSummary):
    technicians: List[UserSummary] = Field(default_factory=list)
    equipment_count: int = 0
    request_count: int = 0
