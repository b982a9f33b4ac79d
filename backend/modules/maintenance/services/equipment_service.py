# backend/modules/maintenance/services/equipment_service.py

from typing import Dict, Iterable, List
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..models import Department, Equipment, MaintenanceRequest, MaintenanceTeam, User
from ..schemas import EquipmentCreate, EquipmentSearchParams, EquipmentUpdate
from .overdue import OPEN_STAGES

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "name",
    "serial_number",
    "category",
    "location",
    "department_id",
    "maintenance_team_id",
    "purchase_date",
)


class EquipmentService:
    """Service for managing the equipment inventory"""

    def __init__(self, db: Session):
        self.db = db

    def create_equipment(self, equipment_data: EquipmentCreate) -> Equipment:
        """Create new equipment"""
        self._ensure_unique_serial(equipment_data.serial_number)
        self._ensure_references(
            equipment_data.department_id,
            equipment_data.maintenance_team_id,
            equipment_data.assigned_employee_id,
        )

        equipment = Equipment(**equipment_data.model_dump(), is_scrapped=False)
        self.db.add(equipment)
        self._commit("create equipment")
        self.db.refresh(equipment)

        logger.info("Equipment %s (%s) created", equipment.id, equipment.serial_number)
        return equipment

    def get_equipment(self, equipment_id: int) -> Equipment:
        """Get equipment by ID"""
        equipment = (
            self.db.query(Equipment)
            .options(
                joinedload(Equipment.maintenance_team),
                joinedload(Equipment.assigned_employee),
            )
            .filter(Equipment.id == equipment_id)
            .first()
        )

        if not equipment:
            raise NotFoundError(f"Equipment with ID {equipment_id} not found")

        return equipment

    def search_equipment(self, params: EquipmentSearchParams) -> List[Equipment]:
        """List equipment with filters, ordered by name"""
        query = self.db.query(Equipment).options(
            joinedload(Equipment.maintenance_team),
            joinedload(Equipment.assigned_employee),
        )

        if params.department_id:
            query = query.filter(Equipment.department_id == params.department_id)

        if params.assigned_employee_id:
            query = query.filter(
                Equipment.assigned_employee_id == params.assigned_employee_id
            )

        if params.category:
            query = query.filter(Equipment.category == params.category)

        if not params.include_scrapped:
            query = query.filter(Equipment.is_scrapped == False)  # noqa: E712

        return query.order_by(Equipment.name.asc(), Equipment.id.asc()).all()

    def open_request_counts(self, equipment_ids: Iterable[int]) -> Dict[int, int]:
        """Number of NEW or IN_PROGRESS requests per equipment id"""
        equipment_ids = list(equipment_ids)
        if not equipment_ids:
            return {}

        rows = (
            self.db.query(MaintenanceRequest.equipment_id, func.count(MaintenanceRequest.id))
            .filter(
                MaintenanceRequest.equipment_id.in_(equipment_ids),
                MaintenanceRequest.stage.in_(list(OPEN_STAGES)),
            )
            .group_by(MaintenanceRequest.equipment_id)
            .all()
        )
        return {equipment_id: count for equipment_id, count in rows}

    def update_equipment(self, equipment_id: int, update_data: EquipmentUpdate) -> Equipment:
        """Update equipment; the scrapped flag can be raised but never cleared"""
        equipment = self.get_equipment(equipment_id)
        update_dict = update_data.model_dump(exclude_unset=True)

        if update_dict.get("is_scrapped") is False and equipment.is_scrapped:
            raise InvalidStateError("Scrapped equipment cannot be returned to service")
        if "is_scrapped" in update_dict and update_dict["is_scrapped"] is None:
            del update_dict["is_scrapped"]

        for field in REQUIRED_FIELDS:
            if field in update_dict and update_dict[field] is None:
                raise ValidationError(f"{field} cannot be cleared")

        purchase_date = update_dict.get("purchase_date", equipment.purchase_date)
        warranty_end_date = update_dict.get(
            "warranty_end_date", equipment.warranty_end_date
        )
        if warranty_end_date and warranty_end_date < purchase_date:
            raise ValidationError("Warranty end date must be after purchase date")

        serial_number = update_dict.get("serial_number")
        if serial_number and serial_number != equipment.serial_number:
            self._ensure_unique_serial(serial_number, exclude_id=equipment_id)

        self._ensure_references(
            update_dict.get("department_id"),
            update_dict.get("maintenance_team_id"),
            update_dict.get("assigned_employee_id"),
        )

        for field, value in update_dict.items():
            setattr(equipment, field, value)

        self._commit("update equipment")
        self.db.refresh(equipment)
        return equipment

    def delete_equipment(self, equipment_id: int) -> None:
        """Delete equipment together with its maintenance requests"""
        equipment = self.get_equipment(equipment_id)
        self.db.delete(equipment)
        self._commit("delete equipment")
        logger.info("Equipment %s deleted", equipment_id)

    def _ensure_unique_serial(self, serial_number: str, exclude_id: int = None) -> None:
        query = self.db.query(Equipment).filter(Equipment.serial_number == serial_number)
        if exclude_id is not None:
            query = query.filter(Equipment.id != exclude_id)
        if query.first():
            raise ConflictError(
                f"Equipment with serial number {serial_number} already exists"
            )

    def _ensure_references(self, department_id, maintenance_team_id, assigned_employee_id):
        if department_id is not None and not self.db.get(Department, department_id):
            raise NotFoundError(f"Department with ID {department_id} not found")
        if maintenance_team_id is not None and not self.db.get(
            MaintenanceTeam, maintenance_team_id
        ):
            raise NotFoundError(f"Maintenance team with ID {maintenance_team_id} not found")
        if assigned_employee_id is not None and not self.db.get(User, assigned_employee_id):
            raise NotFoundError(f"User with ID {assigned_employee_id} not found")

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Integrity error during %s: %s", action, e.orig)
            raise ConflictError(f"Could not {action}: conflicting data") from e
