# backend/modules/maintenance/services/overdue.py

from datetime import datetime, timezone
from typing import Optional

from ..enums import RequestStage

CLOSED_STAGES = frozenset({RequestStage.REPAIRED, RequestStage.SCRAP})
OPEN_STAGES = frozenset({RequestStage.NEW, RequestStage.IN_PROGRESS})


def utc_now() -> datetime:
    """Naive UTC timestamp, matching how dates are stored"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def is_overdue(
    scheduled_date: Optional[datetime], stage: RequestStage, now: datetime
) -> bool:
    """
    Whether a request is late.

    Closed requests are never overdue, and neither are requests without a
    scheduled date. ``now`` is supplied by the caller so the result is
    deterministic.
    """
    if scheduled_date is None or stage in CLOSED_STAGES:
        return False
    return to_naive_utc(scheduled_date) < to_naive_utc(now)
