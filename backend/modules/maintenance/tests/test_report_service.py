# backend/modules/maintenance/tests/test_report_service.py

import pytest
from datetime import datetime

from modules.maintenance.enums import RequestStage, RequestType
from modules.maintenance.schemas import MaintenanceRequestCreate, TransitionPayload
from modules.maintenance.services.report_service import ReportService

NOW = datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture
def populated(service, equipment, employee, manager, alice, actor_for):
    """One overdue preventive, one request in progress, one repaired"""
    service.create_request(
        MaintenanceRequestCreate(
            subject="Late inspection",
            equipment_id=equipment.id,
            request_type=RequestType.PREVENTIVE,
            scheduled_date=datetime(2024, 5, 1),
        ),
        created_by_id=manager.id,
    )
    in_progress = service.create_request(
        MaintenanceRequestCreate(subject="Coolant leak", equipment_id=equipment.id),
        created_by_id=employee.id,
    )
    service.transition(in_progress.id, RequestStage.IN_PROGRESS, actor_for(alice))

    repaired = service.create_request(
        MaintenanceRequestCreate(subject="Belt worn", equipment_id=equipment.id),
        created_by_id=employee.id,
    )
    service.transition(repaired.id, RequestStage.IN_PROGRESS, actor_for(alice))
    service.transition(
        repaired.id,
        RequestStage.REPAIRED,
        actor_for(alice),
        TransitionPayload(duration_hours=3),
    )


class TestReportService:
    """Dashboard aggregates"""

    def test_overview(self, db_session, populated):
        overview = ReportService(db_session).overview(now=NOW)

        assert overview.total_equipment == 1
        assert overview.total_requests == 3
        assert overview.open_requests == 2
        assert overview.overdue_requests == 1

    def test_overview_on_empty_store(self, db_session):
        overview = ReportService(db_session).overview(now=NOW)

        assert overview.model_dump() == {
            "total_equipment": 0,
            "total_requests": 0,
            "open_requests": 0,
            "overdue_requests": 0,
        }

    def test_by_stage_includes_zeros(self, db_session, populated):
        report = ReportService(db_session).by_stage()

        assert {point.label: point.value for point in report} == {
            "NEW": 1,
            "IN_PROGRESS": 1,
            "REPAIRED": 1,
            "SCRAP": 0,
        }

    def test_by_category(self, db_session, populated):
        report = ReportService(db_session).by_category()

        assert {point.label: point.value for point in report} == {
            "MACHINE": 3,
            "VEHICLE": 0,
            "IT": 0,
        }

    def test_by_team(self, db_session, populated):
        rows = ReportService(db_session).by_team()

        assert [row.label for row in rows] == ["Electricians", "Mechanics"]
        electricians, mechanics = rows
        assert electricians.total == 0
        assert mechanics.total == 3
        assert (mechanics.new, mechanics.in_progress, mechanics.repaired, mechanics.scrap) == (
            1,
            1,
            1,
            0,
        )
