from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..attendance.accounting import TimeAccountant, sort_events
from ..attendance.grouping import filter_events_by_month, filter_events_by_period, group_events_by_day
from ..attendance.model import AttendanceEvent
from ..common.datetime_utils import (
    format_date,
    format_minutes,
    format_money,
    format_time,
    is_weekend,
    parse_iso_date,
)
from ..core.constants import MANUAL_EDIT_NOTE
from ..core.enums import EventKind
from .calculator.base import EarningsCalculator
from .calculator.weekday_weekend_calculator import WeekdayWeekendCalculator
from .model import AttendanceReport, DayReportRow, DaySummary, RateTable

SPECIAL_LABELS = {
    EventKind.VACATION: "Vacation",
    EventKind.SICK: "Sick",
}


class ReportAssembler:
    """Pure (events, rates) -> AttendanceReport.

    Days are listed newest first. Totals are sums of per-day figures, so
    weekday and weekend hours keep their own rates.
    """

    def __init__(
        self,
        *,
        accountant: Optional[TimeAccountant] = None,
        calculator: Optional[EarningsCalculator] = None,
    ):
        self._accountant = accountant or TimeAccountant()
        self._calculator = calculator or WeekdayWeekendCalculator()

    def summarize_day(self, day: date, events: Iterable[AttendanceEvent], rates: RateTable) -> DaySummary:
        events = list(events)
        totals = self._accountant.account_day(events)
        specials = [e for e in sort_events(events) if e.kind.is_special]
        return DaySummary(
            date=day,
            worked_minutes=totals.worked_minutes,
            break_minutes=totals.break_minutes,
            is_weekend=is_weekend(day),
            earnings=self._calculator.day_earnings(worked_minutes=totals.worked_minutes, day=day, rates=rates),
            has_custom_entry=any(e.is_custom for e in events),
            has_special_entry=bool(specials),
            special_label=", ".join(SPECIAL_LABELS[e.kind] for e in specials) or None,
        )

    def assemble(
        self,
        events: Iterable[AttendanceEvent],
        rates: RateTable,
        *,
        month: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> AttendanceReport:
        events = list(events)
        if month:
            events = filter_events_by_month(events, month)
        if start or end:
            events = filter_events_by_period(events, start or date.min, end or date.max)

        rows: list[DayReportRow] = []
        total_worked = 0
        total_break = 0
        total_earnings = 0.0

        by_day = group_events_by_day(events)
        for key in sorted(by_day, reverse=True):
            day_events = sort_events(by_day[key])
            summary = self.summarize_day(parse_iso_date(key), day_events, rates)
            rows.append(self._to_row(key, day_events, summary))

            total_worked += summary.worked_minutes
            total_break += summary.break_minutes
            total_earnings += summary.earnings

        return AttendanceReport(
            rows=rows,
            total_worked_minutes=total_worked,
            total_break_minutes=total_break,
            total_earnings=total_earnings,
        )

    def _to_row(self, key: str, day_events: list[AttendanceEvent], summary: DaySummary) -> DayReportRow:
        def times(kind: EventKind) -> list[str]:
            return [format_time(e.timestamp) for e in day_events if e.kind == kind]

        annotation = None
        if summary.has_custom_entry:
            annotation = ", ".join(e.change_note or MANUAL_EDIT_NOTE for e in day_events if e.is_custom)

        return DayReportRow(
            day_key=key,
            date_label=format_date(summary.date),
            arrivals=times(EventKind.ARRIVAL),
            departures=times(EventKind.DEPARTURE),
            breaks=times(EventKind.BREAK),
            worked_label=format_minutes(summary.worked_minutes),
            break_label=format_minutes(summary.break_minutes),
            earnings_label=format_money(summary.earnings),
            summary=summary,
            annotation=annotation,
        )


def assemble_report(events: Iterable[AttendanceEvent], rates: RateTable, **filters) -> AttendanceReport:
    return ReportAssembler().assemble(events, rates, **filters)
