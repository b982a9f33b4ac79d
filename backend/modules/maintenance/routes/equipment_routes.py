# backend/modules/maintenance/routes/equipment_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from core.database import get_db
from ..enums import EquipmentCategory
from ..schemas import (
    Actor,
    Equipment,
    EquipmentCreate,
    EquipmentSearchParams,
    EquipmentUpdate,
)
from ..services.equipment_service import EquipmentService
from .dependencies import get_current_actor, require_manager

router = APIRouter(prefix="/equipment", tags=["equipment"])


def _with_open_counts(service: EquipmentService, items) -> List[Equipment]:
    counts = service.open_request_counts(item.id for item in items)
    results = []
    for item in items:
        data = Equipment.model_validate(item)
        data.open_request_count = counts.get(item.id, 0)
        results.append(data)
    return results


@router.get("/", response_model=List[Equipment])
async def list_equipment(
    department_id: Optional[int] = Query(None),
    assigned_employee_id: Optional[int] = Query(None),
    category: Optional[EquipmentCategory] = Query(None),
    include_scrapped: bool = Query(False, description="Include scrapped equipment"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    service = EquipmentService(db)
    params = EquipmentSearchParams(
        department_id=department_id,
        assigned_employee_id=assigned_employee_id,
        category=category,
        include_scrapped=include_scrapped,
    )
    return _with_open_counts(service, service.search_equipment(params))


@router.post("/", response_model=Equipment, status_code=status.HTTP_201_CREATED)
async def create_equipment(
    equipment_data: EquipmentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manager),
):
    """
    Register new equipment.

    Raises:
        404: Department, team or employee not found
        409: Duplicate serial number
    """
    service = EquipmentService(db)
    return _with_open_counts(service, [service.create_equipment(equipment_data)])[0]


@router.get("/{equipment_id}", response_model=Equipment)
async def get_equipment(
    equipment_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    service = EquipmentService(db)
    return _with_open_counts(service, [service.get_equipment(equipment_id)])[0]


@router.put("/{equipment_id}", response_model=Equipment)
async def update_equipment(
    equipment_id: int,
    update_data: EquipmentUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manager),
):
    service = EquipmentService(db)
    equipment = service.update_equipment(equipment_id, update_data)
    return _with_open_counts(service, [equipment])[0]


@router.delete("/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_equipment(
    equipment_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manager),
):
    EquipmentService(db).delete_equipment(equipment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
