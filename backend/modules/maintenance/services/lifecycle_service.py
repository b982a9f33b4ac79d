# backend/modules/maintenance/services/lifecycle_service.py

import logging
import math
from datetime import datetime
from typing import Callable, List, Optional

from core.exceptions import (
    ForbiddenError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from core.query_logger import log_query_performance
from ..enums import RequestStage, RequestType
from ..models import MaintenanceNote, MaintenanceRequest
from ..schemas import (
    Actor,
    MaintenanceRequestCreate,
    RequestDetailsUpdate,
    RequestSearchParams,
    TransitionPayload,
)
from .authorization_rules import (
    available_transitions,
    can_create_preventive,
    can_mark_repaired,
    can_mark_scrap,
    can_pick_up,
    is_valid_transition,
)
from .overdue import utc_now
from .repository import MaintenanceRepository

logger = logging.getLogger(__name__)

SCRAP_NOTE_TEMPLATE = (
    'Equipment "{name}" has been marked as scrapped and will no longer '
    "accept maintenance requests."
)


class RequestLifecycleService:
    """Creates maintenance requests and moves them through their stages"""

    def __init__(
        self,
        repository: MaintenanceRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.clock = clock

    # Queries
    def get_request(self, request_id: int) -> MaintenanceRequest:
        """Get maintenance request by ID"""
        request = self.repository.find_request_by_id(request_id)
        if not request:
            raise NotFoundError(f"Maintenance request with ID {request_id} not found")
        return request

    def list_requests(self, params: RequestSearchParams) -> List[MaintenanceRequest]:
        return self.repository.list_requests(params)

    def get_available_transitions(
        self, request_id: int, actor: Actor
    ) -> List[RequestStage]:
        """Stages the actor could move the request to right now"""
        request = self.get_request(request_id)
        return available_transitions(
            actor.role,
            actor.id,
            request.stage,
            request.maintenance_team.technician_ids,
            request.assigned_technician_id,
        )

    # Creation
    def create_request(
        self, request_data: MaintenanceRequestCreate, created_by_id: int
    ) -> MaintenanceRequest:
        """
        Create a maintenance request in stage NEW.

        The maintenance team is copied from the equipment; callers cannot
        choose it.

        Raises:
            NotFoundError: equipment or creator does not exist
            InvalidStateError: equipment is scrapped
            ValidationError: preventive request without a scheduled date
            ForbiddenError: preventive request raised by a non-manager
        """
        equipment = self.repository.find_equipment_by_id(request_data.equipment_id)
        if not equipment:
            raise NotFoundError(
                f"Equipment with ID {request_data.equipment_id} not found"
            )

        creator = self.repository.find_user_by_id(created_by_id)
        if not creator:
            raise NotFoundError(f"User with ID {created_by_id} not found")

        if equipment.is_scrapped:
            raise InvalidStateError(
                f'Cannot create request for scrapped equipment "{equipment.name}"'
            )

        if request_data.request_type == RequestType.PREVENTIVE:
            if request_data.scheduled_date is None:
                raise ValidationError(
                    "Scheduled date is required for preventive maintenance"
                )
            if not can_create_preventive(creator.role):
                raise ForbiddenError(
                    "Only managers can create preventive maintenance requests"
                )

        with self.repository.atomic():
            request = self.repository.create_request(
                {
                    "subject": request_data.subject,
                    "description": request_data.description,
                    "request_type": request_data.request_type,
                    "equipment_id": equipment.id,
                    "maintenance_team_id": equipment.maintenance_team_id,
                    "scheduled_date": request_data.scheduled_date,
                    "created_by_id": creator.id,
                    "stage": RequestStage.NEW,
                }
            )
            request_id = request.id

        logger.info(
            "Maintenance request %s created by user %s for equipment %s",
            request_id,
            creator.id,
            equipment.id,
        )
        return self.get_request(request_id)

    # Transitions
    def transition(
        self,
        request_id: int,
        target_stage: RequestStage,
        actor: Actor,
        payload: Optional[TransitionPayload] = None,
    ) -> MaintenanceRequest:
        """
        Move a request to ``target_stage`` on behalf of ``actor``.

        Every precondition is checked before anything is written. Moving to
        the current stage is rejected like any other missing edge.
        """
        payload = payload or TransitionPayload()
        request = self.get_request(request_id)
        current_stage = request.stage

        if not is_valid_transition(current_stage, target_stage):
            logger.warning(
                "Rejected transition of request %s from %s to %s by user %s",
                request_id,
                current_stage.value,
                target_stage.value,
                actor.id,
            )
            raise InvalidTransitionError(
                f"Cannot move request from {current_stage.value} to {target_stage.value}"
            )

        if target_stage == RequestStage.IN_PROGRESS:
            self._start_work(request, current_stage, actor, payload)
        elif target_stage == RequestStage.REPAIRED:
            self._mark_repaired(request, current_stage, actor, payload)
        else:
            self._scrap(request, current_stage, actor)

        logger.info(
            "Request %s moved from %s to %s by user %s",
            request_id,
            current_stage.value,
            target_stage.value,
            actor.id,
        )
        return self.get_request(request_id)

    def _start_work(
        self,
        request: MaintenanceRequest,
        current_stage: RequestStage,
        actor: Actor,
        payload: TransitionPayload,
    ) -> None:
        if not can_pick_up(actor.role, actor.id, request.maintenance_team.technician_ids):
            raise ForbiddenError(
                "Only technicians from the assigned team can pick up this request"
            )

        technician_id = payload.assigned_technician_id
        if technician_id is None:
            technician_id = actor.id
        if technician_id != actor.id:
            raise ValidationError("Technicians can only assign requests to themselves")

        with self.repository.atomic():
            self._apply_stage(
                request.id,
                current_stage,
                {
                    "stage": RequestStage.IN_PROGRESS,
                    "assigned_technician_id": technician_id,
                },
            )

    def _mark_repaired(
        self,
        request: MaintenanceRequest,
        current_stage: RequestStage,
        actor: Actor,
        payload: TransitionPayload,
    ) -> None:
        if not can_mark_repaired(actor.role, actor.id, request.assigned_technician_id):
            raise ForbiddenError("Only the assigned technician can mark this as repaired")

        duration = payload.duration_hours
        if duration is None:
            raise ValidationError("Duration is required before marking as repaired")
        if not math.isfinite(duration) or duration < 0:
            raise ValidationError("Duration must be a non-negative number of hours")

        with self.repository.atomic():
            self._apply_stage(
                request.id,
                current_stage,
                {"stage": RequestStage.REPAIRED, "duration_hours": duration},
            )

    def _scrap(
        self, request: MaintenanceRequest, current_stage: RequestStage, actor: Actor
    ) -> None:
        if not can_mark_scrap(actor.role):
            raise ForbiddenError("Only managers can scrap equipment")

        equipment = request.equipment
        content = SCRAP_NOTE_TEMPLATE.format(name=equipment.name)

        # Equipment flag, system note and stage change land together or not at all
        with log_query_performance("scrap_request"), self.repository.atomic():
            self.repository.update_equipment(equipment.id, {"is_scrapped": True})
            self.repository.create_note(
                {
                    "request_id": request.id,
                    "content": content,
                    "user_id": None,
                    "is_system": True,
                }
            )
            self._apply_stage(request.id, current_stage, {"stage": RequestStage.SCRAP})

        logger.info("Equipment %s scrapped through request %s", equipment.id, request.id)

    def _apply_stage(
        self, request_id: int, expected_stage: RequestStage, patch: dict
    ) -> None:
        """Conditional write: only succeeds while the request is still in ``expected_stage``"""
        if not self.repository.update_request(
            request_id, patch, expected_stage=expected_stage
        ):
            logger.warning(
                "Request %s left stage %s before the update was applied",
                request_id,
                expected_stage.value,
            )
            raise InvalidTransitionError(
                f"Request is no longer in stage {expected_stage.value}; it was updated by someone else"
            )

    # Notes
    def add_note(self, request_id: int, content: str, author_id: int) -> MaintenanceNote:
        """Append a user note; allowed in every stage"""
        content = (content or "").strip()
        if not content:
            raise ValidationError("Note content cannot be empty")

        self.get_request(request_id)
        author = self.repository.find_user_by_id(author_id)
        if not author:
            raise NotFoundError(f"User with ID {author_id} not found")

        with self.repository.atomic():
            note = self.repository.create_note(
                {
                    "request_id": request_id,
                    "content": content,
                    "user_id": author.id,
                    "is_system": False,
                }
            )
        return note

    # Administrative edits
    def update_request_details(
        self, request_id: int, update_data: RequestDetailsUpdate
    ) -> MaintenanceRequest:
        """Edit subject, description or scheduled date"""
        request = self.get_request(request_id)
        patch = update_data.model_dump(exclude_unset=True)

        if "subject" in patch:
            if patch["subject"] is None or not patch["subject"].strip():
                raise ValidationError("Subject cannot be empty")
            patch["subject"] = patch["subject"].strip()

        if "description" in patch and patch["description"] is None:
            patch["description"] = ""

        if (
            "scheduled_date" in patch
            and patch["scheduled_date"] is None
            and request.request_type == RequestType.PREVENTIVE
        ):
            raise ValidationError(
                "Scheduled date is required for preventive maintenance"
            )

        if patch:
            with self.repository.atomic():
                self.repository.update_request(request_id, patch)
        return self.get_request(request_id)

    def delete_request(self, request_id: int) -> None:
        """Administrative hard delete, outside the lifecycle"""
        with self.repository.atomic():
            if not self.repository.delete_request(request_id):
                raise NotFoundError(f"Maintenance request with ID {request_id} not found")
        logger.info("Maintenance request %s deleted", request_id)
