# backend/modules/maintenance/schemas/__init__.py
"""Maintenance schemas module"""

from .organization_schemas import (
    DepartmentCreate,
    Department,
    UserCreate,
    UserSummary,
    User,
    TeamCreate,
    TeamUpdate,
    TeamSummary,
    Team,
)
from .equipment_schemas import (
    EquipmentCreate,
    EquipmentUpdate,
    EquipmentSearchParams,
    EquipmentSummary,
    Equipment,
)
from .request_schemas import (
    Actor,
    MaintenanceRequestCreate,
    TransitionPayload,
    TransitionRequest,
    RequestDetailsUpdate,
    NoteCreate,
    RequestSearchParams,
    MaintenanceNote,
    MaintenanceRequest,
    TransitionOptions,
)
from .report_schemas import ReportOverview, ReportDataPoint, TeamReportRow

__all__ = [
    "DepartmentCreate",
    "Department",
    "UserCreate",
    "UserSummary",
    "User",
    "TeamCreate",
    "TeamUpdate",
    "TeamSummary",
    "Team",
    "EquipmentCreate",
    "EquipmentUpdate",
    "EquipmentSearchParams",
    "EquipmentSummary",
    "Equipment",
    "Actor",
    "MaintenanceRequestCreate",
    "TransitionPayload",
    "TransitionRequest",
    "RequestDetailsUpdate",
    "NoteCreate",
    "RequestSearchParams",
    "MaintenanceNote",
    "MaintenanceRequest",
    "TransitionOptions",
    "ReportOverview",
    "ReportDataPoint",
    "TeamReportRow",
]
