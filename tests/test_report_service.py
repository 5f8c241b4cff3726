from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_ledger.attendance_ledger.attendance.model import AttendanceEvent
from src.attendance_ledger.attendance_ledger.core.enums import EventKind
from src.attendance_ledger.attendance_ledger.core.exceptions import StoreUnavailableError
from src.attendance_ledger.attendance_ledger.payroll.model import RateTable
from src.attendance_ledger.attendance_ledger.payroll.service import PayrollReportService


class FakeRecordStore:
    def __init__(self, events, rates=None):
        self._events = events
        self._rates = rates or RateTable()
        self.last_person_id = None

    def get_events(self, person_id):
        self.last_person_id = person_id
        return self._events

    def get_rates(self):
        return self._rates


class DownRecordStore:
    def get_events(self, person_id):
        raise StoreUnavailableError("store offline")

    def get_rates(self):
        raise StoreUnavailableError("store offline")


def test_report_uses_stored_rates():
    events = [
        AttendanceEvent(kind=EventKind.ARRIVAL, timestamp=datetime(2025, 1, 6, 8, 0)),
        AttendanceEvent(kind=EventKind.DEPARTURE, timestamp=datetime(2025, 1, 6, 10, 0)),
    ]
    store = FakeRecordStore(events, RateTable(weekday_rate=100, weekend_rate=300))

    report = PayrollReportService(store).build_person_report("p1")

    assert store.last_person_id == "p1"
    assert report.total_earnings == pytest.approx(200.0)


def test_report_forwards_month_filter():
    events = [
        AttendanceEvent(kind=EventKind.ARRIVAL, timestamp=datetime(2025, 2, 3, 8, 0)),
        AttendanceEvent(kind=EventKind.DEPARTURE, timestamp=datetime(2025, 2, 3, 10, 0)),
    ]
    report = PayrollReportService(FakeRecordStore(events)).build_person_report("p1", month="2025-01")

    assert report.rows == []


def test_store_outage_is_not_reported_as_empty():
    with pytest.raises(StoreUnavailableError):
        PayrollReportService(DownRecordStore()).build_person_report("p1")
