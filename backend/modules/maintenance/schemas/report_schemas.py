# backend/modules/maintenance/schemas/report_schemas.py

from pydantic import BaseModel


class ReportOverview(BaseModel):
    total_equipment: int
    total_requests: int
    open_requests: int
    overdue_requests: int


class ReportDataPoint(BaseModel):
    label: str
    value: int


class TeamReportRow(BaseModel):
    label: str
    total: int
    new: int
    in_progress: int
    repaired: int
    scrap: int
