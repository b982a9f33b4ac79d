# backend/modules/maintenance/services/repository.py

"""
Storage access for the request lifecycle.

``MaintenanceRepository`` is the contract the lifecycle service depends on;
``SQLAlchemyMaintenanceRepository`` implements it on a SQLAlchemy session.
Write methods never commit on their own: callers group them inside
``atomic()`` so several writes land or fail together.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from core.exceptions import InternalError
from ..enums import RequestStage
from ..models import (
    Equipment,
    MaintenanceNote,
    MaintenanceRequest,
    MaintenanceTeam,
    User,
)
from ..schemas import RequestSearchParams

logger = logging.getLogger(__name__)


class MaintenanceRepository(ABC):
    """Entity store used by the request lifecycle"""

    @abstractmethod
    def find_request_by_id(
        self, request_id: int, with_team_and_technicians: bool = True
    ) -> Optional[MaintenanceRequest]:
        ...

    @abstractmethod
    def find_equipment_by_id(self, equipment_id: int) -> Optional[Equipment]:
        ...

    @abstractmethod
    def find_user_by_id(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    def list_requests(self, params: RequestSearchParams) -> List[MaintenanceRequest]:
        ...

    @abstractmethod
    def create_request(self, data: Dict[str, Any]) -> MaintenanceRequest:
        ...

    @abstractmethod
    def update_request(
        self,
        request_id: int,
        patch: Dict[str, Any],
        expected_stage: Optional[RequestStage] = None,
    ) -> bool:
        """Apply ``patch``; with ``expected_stage`` only if the stage still matches.

        Returns False when no row was updated.
        """

    @abstractmethod
    def update_equipment(self, equipment_id: int, patch: Dict[str, Any]) -> bool:
        ...

    @abstractmethod
    def create_note(self, data: Dict[str, Any]) -> MaintenanceNote:
        ...

    @abstractmethod
    def delete_request(self, request_id: int) -> bool:
        ...

    @abstractmethod
    def atomic(self):
        """Context manager committing every write inside it, or none."""


class SQLAlchemyMaintenanceRepository(MaintenanceRepository):
    """Repository backed by a SQLAlchemy session"""

    def __init__(self, db: Session):
        self.db = db

    def find_request_by_id(
        self, request_id: int, with_team_and_technicians: bool = True
    ) -> Optional[MaintenanceRequest]:
        query = self.db.query(MaintenanceRequest).options(
            joinedload(MaintenanceRequest.equipment),
            selectinload(MaintenanceRequest.notes),
        )
        if with_team_and_technicians:
            query = query.options(
                joinedload(MaintenanceRequest.maintenance_team).selectinload(
                    MaintenanceTeam.technicians
                )
            )
        return query.filter(MaintenanceRequest.id == request_id).first()

    def find_equipment_by_id(self, equipment_id: int) -> Optional[Equipment]:
        return self.db.get(Equipment, equipment_id)

    def find_user_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def list_requests(self, params: RequestSearchParams) -> List[MaintenanceRequest]:
        query = self.db.query(MaintenanceRequest).options(
            joinedload(MaintenanceRequest.equipment),
            joinedload(MaintenanceRequest.maintenance_team).selectinload(
                MaintenanceTeam.technicians
            ),
            joinedload(MaintenanceRequest.assigned_technician),
            joinedload(MaintenanceRequest.created_by),
            selectinload(MaintenanceRequest.notes),
        )

        # Apply filters
        if params.equipment_id:
            query = query.filter(MaintenanceRequest.equipment_id == params.equipment_id)

        if params.maintenance_team_id:
            query = query.filter(
                MaintenanceRequest.maintenance_team_id == params.maintenance_team_id
            )

        if params.stage:
            query = query.filter(MaintenanceRequest.stage == params.stage)

        if params.request_type:
            query = query.filter(MaintenanceRequest.request_type == params.request_type)

        if params.scheduled_from:
            query = query.filter(MaintenanceRequest.scheduled_date >= params.scheduled_from)

        if params.scheduled_to:
            query = query.filter(MaintenanceRequest.scheduled_date <= params.scheduled_to)

        return query.order_by(
            MaintenanceRequest.created_at.desc(), MaintenanceRequest.id.desc()
        ).all()

    def create_request(self, data: Dict[str, Any]) -> MaintenanceRequest:
        request = MaintenanceRequest(**data)
        self.db.add(request)
        self.db.flush()
        return request

    def update_request(
        self,
        request_id: int,
        patch: Dict[str, Any],
        expected_stage: Optional[RequestStage] = None,
    ) -> bool:
        query = self.db.query(MaintenanceRequest).filter(
            MaintenanceRequest.id == request_id
        )
        if expected_stage is not None:
            query = query.filter(MaintenanceRequest.stage == expected_stage)
        updated = query.update(patch, synchronize_session="fetch")
        return updated == 1

    def update_equipment(self, equipment_id: int, patch: Dict[str, Any]) -> bool:
        updated = (
            self.db.query(Equipment)
            .filter(Equipment.id == equipment_id)
            .update(patch, synchronize_session="fetch")
        )
        return updated == 1

    def create_note(self, data: Dict[str, Any]) -> MaintenanceNote:
        note = MaintenanceNote(**data)
        self.db.add(note)
        self.db.flush()
        return note

    def delete_request(self, request_id: int) -> bool:
        request = self.db.get(MaintenanceRequest, request_id)
        if request is None:
            return False
        self.db.delete(request)
        self.db.flush()
        return True

    @contextmanager
    def atomic(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Maintenance store transaction failed: %s", e, exc_info=True)
            raise InternalError("The change could not be saved; nothing was modified") from e
        except Exception:
            self.db.rollback()
            raise
