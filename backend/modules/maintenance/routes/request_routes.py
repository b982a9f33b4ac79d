# backend/modules/maintenance/routes/request_routes.py

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ..enums import RequestStage, RequestType
from ..schemas import (
    Actor,
    MaintenanceNote,
    MaintenanceRequest,
    MaintenanceRequestCreate,
    NoteCreate,
    RequestDetailsUpdate,
    RequestSearchParams,
    TransitionOptions,
    TransitionPayload,
    TransitionRequest,
)
from ..services.lifecycle_service import RequestLifecycleService
from .dependencies import get_current_actor, get_lifecycle_service, require_manager

router = APIRouter(prefix="/requests", tags=["maintenance-requests"])


@router.get("/", response_model=List[MaintenanceRequest])
async def list_requests(
    equipment_id: Optional[int] = Query(None, description="Filter by equipment"),
    maintenance_team_id: Optional[int] = Query(None, description="Filter by team"),
    stage: Optional[RequestStage] = Query(None, description="Filter by stage"),
    request_type: Optional[RequestType] = Query(None, description="Filter by type"),
    scheduled_from: Optional[datetime] = Query(None),
    scheduled_to: Optional[datetime] = Query(None),
    service: RequestLifecycleService = Depends(get_lifecycle_service),
    actor: Actor = Depends(get_current_actor),
):
    """List maintenance requests, newest first, each flagged if overdue"""
    params = RequestSearchParams(
        equipment_id=equipment_id,
        maintenance_team_id=maintenance_team_id,
        stage=stage,
        request_type=request_type,
        scheduled_from=scheduled_from,
        scheduled_to=scheduled_to,
    )
    now = service.clock()
    return [
        MaintenanceRequest.from_orm_request(request, now)
        for request in service.list_requests(params)
    ]


@router.post("/", response_model=MaintenanceRequest, status_code=status.HTTP_201_CREATED)
async def create_request(
    request_data: MaintenanceRequestCreate,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
    actor: Actor = Depends(get_current_actor),
):
    """
    Raise a maintenance request against a piece of equipment.

    Raises:
        404: Equipment not found
        400: Equipment scrapped, or preventive request without a date
        403: Preventive request raised by a non-manager
    """
    request = service.create_request(request_data, created_by_id=actor.id)
    return MaintenanceRequest.from_orm_request(request, service.clock())


@router.get("/{request_id}", response_model=MaintenanceRequest)
async def get_request(
    request_id: int,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
    actor: Actor = Depends(get_current_actor),
):
    request = service.get_request(request_id)
    return MaintenanceRequest.from_orm_request(request, service.clock())


@router.patch("/{request_id}", response_model=MaintenanceRequest)
async def update_request_details(
    request_id: int,
    update_data: RequestDetailsUpdate,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
    actor: Actor = Depends(require_manager),
):
    """Edit subject, description or scheduled date (managers only)"""
    request = service.update_request_details(request_id, update_data)
    return MaintenanceRequest.from_orm_request(request, service.clock())


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_request(
    request_id: int,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
    actor: Actor = Depends(require_manager),
):
    service.delete_request(request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{request_id}/transition", response_model=MaintenanceRequest)
async def transition_request(
    request_id: int,
    transition: TransitionRequest,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
    actor: Actor = Depends(get_current_actor),
):
    """
    Move a request to another stage.

    Raises:
        400: Stage not reachable, or a required field is missing
        403: Actor may not perform this transition
        404: Request not found
    """
    payload = TransitionPayload(
        assigned_technician_id=transition.assigned_technician_id,
        duration_hours=transition.duration_hours,
    )
    request = service.transition(request_id, transition.target_stage, actor, payload)
    return MaintenanceRequest.from_orm_request(request, service.clock())


@router.get("/{request_id}/transitions", response_model=TransitionOptions)
async def get_available_transitions(
    request_id: int,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
    actor: Actor = Depends(get_current_actor),
):
    """Stages the caller could move this request to"""
    request = service.get_request(request_id)
    return TransitionOptions(
        request_id=request.id,
        stage=request.stage,
        available_transitions=service.get_available_transitions(request_id, actor),
    )


@router.post(
    "/{request_id}/notes",
    response_model=MaintenanceNote,
    status_code=status.HTTP_201_CREATED,
)
async def add_note(
    request_id: int,
    note_data: NoteCreate,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
    actor: Actor = Depends(get_current_actor),
):
    return service.add_note(request_id, note_data.content, author_id=actor.id)
