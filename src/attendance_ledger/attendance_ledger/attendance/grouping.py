from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from ..common.datetime_utils import date_key, parse_month
from ..core.enums import EventKind
from ..core.exceptions import MalformedEventError
from .model import AttendanceEvent


def _require_well_formed(event: AttendanceEvent) -> None:
    if not isinstance(event, AttendanceEvent):
        raise MalformedEventError(f"Expected AttendanceEvent, got {type(event).__name__}")
    if not isinstance(event.kind, EventKind):
        raise MalformedEventError(f"Unknown event kind: {event.kind!r}")
    if not isinstance(event.timestamp, datetime):
        raise MalformedEventError(f"Unparseable timestamp: {event.timestamp!r}")


def group_events_by_day(events: Iterable[AttendanceEvent]) -> dict[str, list[AttendanceEvent]]:
    """Partition events into buckets keyed by local calendar date (YYYY-MM-DD).

    Every event lands in exactly one bucket. Order inside a bucket follows the
    input order; consumers sort as they need.
    """

    by_day: dict[str, list[AttendanceEvent]] = {}
    for event in events:
        _require_well_formed(event)
        by_day.setdefault(date_key(event.timestamp), []).append(event)
    return by_day


def filter_events_by_month(events: Iterable[AttendanceEvent], month: str) -> list[AttendanceEvent]:
    year, month_no = parse_month(month)
    return [e for e in events if e.timestamp.year == year and e.timestamp.month == month_no]


def filter_events_by_period(events: Iterable[AttendanceEvent], start: date, end: date) -> list[AttendanceEvent]:
    """Keep events whose local date lies in [start, end]."""
    return [e for e in events if start <= e.timestamp.date() <= end]
