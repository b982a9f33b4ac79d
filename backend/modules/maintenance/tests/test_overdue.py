# backend/modules/maintenance/tests/test_overdue.py

from datetime import datetime, timedelta, timezone

import pytest

from modules.maintenance.enums import RequestStage
from modules.maintenance.services.overdue import is_overdue, to_naive_utc

NOW = datetime(2024, 6, 1, 12, 0, 0)


@pytest.mark.parametrize("stage", [RequestStage.NEW, RequestStage.IN_PROGRESS])
def test_open_request_past_schedule_is_overdue(stage):
    assert is_overdue(NOW - timedelta(minutes=1), stage, NOW)


@pytest.mark.parametrize("stage", [RequestStage.REPAIRED, RequestStage.SCRAP])
def test_closed_request_is_never_overdue(stage):
    assert not is_overdue(NOW - timedelta(days=30), stage, NOW)


def test_request_without_schedule_is_not_overdue():
    assert not is_overdue(None, RequestStage.NEW, NOW)


def test_schedule_equal_to_now_is_not_overdue():
    assert not is_overdue(NOW, RequestStage.NEW, NOW)


def test_future_schedule_is_not_overdue():
    assert not is_overdue(NOW + timedelta(hours=1), RequestStage.IN_PROGRESS, NOW)


def test_aware_and_naive_datetimes_compare_in_utc():
    # 13:30 at UTC+2 is 11:30 UTC, before NOW
    scheduled = datetime(2024, 6, 1, 13, 30, tzinfo=timezone(timedelta(hours=2)))
    assert is_overdue(scheduled, RequestStage.NEW, NOW)


def test_to_naive_utc_keeps_naive_values():
    assert to_naive_utc(NOW) is NOW
    assert to_naive_utc(None) is None
