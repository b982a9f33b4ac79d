# backend/modules/maintenance/routes/report_routes.py

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from ..schemas import Actor, ReportDataPoint, ReportOverview, TeamReportRow
from ..services.report_service import ReportService
from .dependencies import get_current_actor

router = APIRouter(prefix="/reports", tags=["maintenance-reports"])


@router.get("/overview", response_model=ReportOverview)
async def get_overview(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return ReportService(db).overview()


@router.get("/by-stage", response_model=List[ReportDataPoint])
async def get_requests_by_stage(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return ReportService(db).by_stage()


@router.get("/by-category", response_model=List[ReportDataPoint])
async def get_requests_by_category(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return ReportService(db).by_category()


@router.get("/by-team", response_model=List[TeamReportRow])
async def get_requests_by_team(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return ReportService(db).by_team()
