from __future__ import annotations

from datetime import date
from typing import Optional

from ..storage.record_store import RecordStore
from .model import AttendanceReport
from .report import ReportAssembler


class PayrollReportService:
    """Loads a person's events and the rate table, then assembles the report.

    Store failures propagate; a report is never built from substituted
    empty data.
    """

    def __init__(self, store: RecordStore, *, assembler: Optional[ReportAssembler] = None):
        self._store = store
        self._assembler = assembler or ReportAssembler()

    def build_person_report(
        self,
        person_id: str,
        *,
        month: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> AttendanceReport:
        events = self._store.get_events(person_id)
        rates = self._store.get_rates()
        return self._assembler.assemble(events, rates, month=month, start=start, end=end)
