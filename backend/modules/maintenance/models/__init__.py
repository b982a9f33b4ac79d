# backend/modules/maintenance/models/__init__.py
"""Maintenance models module"""

from .organization_models import Department, User, MaintenanceTeam, team_technicians
from .equipment_models import Equipment
from .request_models import MaintenanceRequest, MaintenanceNote

__all__ = [
    "Department",
    "User",
    "MaintenanceTeam",
    "team_technicians",
    "Equipment",
    "MaintenanceRequest",
    "MaintenanceNote",
]
