# backend/modules/maintenance/__init__.py
"""Equipment maintenance tracking: requests, their lifecycle, and the teams servicing equipment."""

from .routes import router
from .models import (
    Department,
    User,
    MaintenanceTeam,
    Equipment,
    MaintenanceRequest,
    MaintenanceNote,
)
from .enums import UserRole, EquipmentCategory, RequestType, RequestStage

__all__ = [
    "router",
    "Department",
    "User",
    "MaintenanceTeam",
    "Equipment",
    "MaintenanceRequest",
    "MaintenanceNote",
    "UserRole",
    "EquipmentCategory",
    "RequestType",
    "RequestStage",
]
