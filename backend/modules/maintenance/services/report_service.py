# backend/modules/maintenance/services/report_service.py

"""
Aggregate counts for the maintenance dashboard.

Overdue counting uses the same rule as ``overdue.is_overdue``: a scheduled
date in the past and a stage that is still open.
"""

from collections import defaultdict
from datetime import datetime
from typing import List, Optional
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..enums import EquipmentCategory, RequestStage
from ..models import Equipment, MaintenanceRequest, MaintenanceTeam
from ..schemas import ReportDataPoint, ReportOverview, TeamReportRow
from .overdue import OPEN_STAGES, to_naive_utc, utc_now

logger = logging.getLogger(__name__)


class ReportService:
    """Service for maintenance reporting"""

    def __init__(self, db: Session):
        self.db = db

    def overview(self, now: Optional[datetime] = None) -> ReportOverview:
        now = to_naive_utc(now) if now else utc_now()
        open_stages = list(OPEN_STAGES)

        total_equipment = (
            self.db.query(func.count(Equipment.id))
            .filter(Equipment.is_scrapped == False)  # noqa: E712
            .scalar()
        )
        total_requests = self.db.query(func.count(MaintenanceRequest.id)).scalar()
        open_requests = (
            self.db.query(func.count(MaintenanceRequest.id))
            .filter(MaintenanceRequest.stage.in_(open_stages))
            .scalar()
        )
        overdue_requests = (
            self.db.query(func.count(MaintenanceRequest.id))
            .filter(
                MaintenanceRequest.stage.in_(open_stages),
                MaintenanceRequest.scheduled_date.isnot(None),
                MaintenanceRequest.scheduled_date < now,
            )
            .scalar()
        )

        return ReportOverview(
            total_equipment=total_equipment or 0,
            total_requests=total_requests or 0,
            open_requests=open_requests or 0,
            overdue_requests=overdue_requests or 0,
        )

    def by_stage(self) -> List[ReportDataPoint]:
        """Request count for every stage, zeros included"""
        rows = (
            self.db.query(MaintenanceRequest.stage, func.count(MaintenanceRequest.id))
            .group_by(MaintenanceRequest.stage)
            .all()
        )
        counts = {stage: count for stage, count in rows}
        return [
            ReportDataPoint(label=stage.value, value=counts.get(stage, 0))
            for stage in RequestStage
        ]

    def by_category(self) -> List[ReportDataPoint]:
        """Request count per equipment category, zeros included"""
        rows = (
            self.db.query(Equipment.category, func.count(MaintenanceRequest.id))
            .join(MaintenanceRequest, MaintenanceRequest.equipment_id == Equipment.id)
            .group_by(Equipment.category)
            .all()
        )
        counts = {category: count for category, count in rows}
        return [
            ReportDataPoint(label=category.value, value=counts.get(category, 0))
            for category in EquipmentCategory
        ]

    def by_team(self) -> List[TeamReportRow]:
        """Per-team request counts broken down by stage, teams ordered by name"""
        teams = self.db.query(MaintenanceTeam).order_by(MaintenanceTeam.name.asc()).all()
        rows = (
            self.db.query(
                MaintenanceRequest.maintenance_team_id,
                MaintenanceRequest.stage,
                func.count(MaintenanceRequest.id),
            )
            .group_by(MaintenanceRequest.maintenance_team_id, MaintenanceRequest.stage)
            .all()
        )

        counts = defaultdict(lambda: defaultdict(int))
        for team_id, stage, count in rows:
            counts[team_id][stage] = count

        report = []
        for team in teams:
            stage_counts = counts[team.id]
            report.append(
                TeamReportRow(
                    label=team.name,
                    total=sum(stage_counts.values()),
                    new=stage_counts[RequestStage.NEW],
                    in_progress=stage_counts[RequestStage.IN_PROGRESS],
                    repaired=stage_counts[RequestStage.REPAIRED],
                    scrap=stage_counts[RequestStage.SCRAP],
                )
            )
        return report
