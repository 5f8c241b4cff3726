from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..core.enums import EventKind, TrackerState
from .model import AttendanceEvent


@dataclass(frozen=True)
class DayTotals:
    worked_minutes: int = 0
    break_minutes: int = 0


def whole_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants; out-of-order pairs count as zero."""
    seconds = (end - start).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // 60)


class _DayWalk:
    """Mutable cursor for one pass over a single day's events."""

    def __init__(self):
        self.state = TrackerState.IDLE
        self.last_start: Optional[datetime] = None
        self.break_start: Optional[datetime] = None
        self.worked = 0
        self.on_break = 0

    # Idle

    def _idle_arrival(self, at: datetime) -> None:
        self.last_start = at
        self.state = TrackerState.WORKING

    def _ignore(self, at: datetime) -> None:
        pass

    # Working

    def _working_arrival(self, at: datetime) -> None:
        # The earlier open interval is dropped without accruing anything.
        self.last_start = at

    def _working_departure(self, at: datetime) -> None:
        self.worked += whole_minutes(self.last_start, at)
        self.last_start = None
        self.state = TrackerState.IDLE

    def _working_break(self, at: datetime) -> None:
        self.worked += whole_minutes(self.last_start, at)
        self.last_start = None
        self.break_start = at
        self.state = TrackerState.ON_BREAK

    # On break

    def _break_end(self, at: datetime) -> None:
        self.on_break += whole_minutes(self.break_start, at)
        self.break_start = None
        self.last_start = at
        self.state = TrackerState.WORKING

    def _break_departure(self, at: datetime) -> None:
        # An open break is not closed by a departure.
        self.break_start = None
        self.state = TrackerState.IDLE

    def step(self, event: AttendanceEvent) -> None:
        _TRANSITIONS[(self.state, event.kind)](self, event.timestamp)


_TRANSITIONS = {
    (TrackerState.IDLE, EventKind.ARRIVAL): _DayWalk._idle_arrival,
    (TrackerState.IDLE, EventKind.DEPARTURE): _DayWalk._ignore,
    (TrackerState.IDLE, EventKind.BREAK): _DayWalk._ignore,
    (TrackerState.WORKING, EventKind.ARRIVAL): _DayWalk._working_arrival,
    (TrackerState.WORKING, EventKind.DEPARTURE): _DayWalk._working_departure,
    (TrackerState.WORKING, EventKind.BREAK): _DayWalk._working_break,
    (TrackerState.ON_BREAK, EventKind.ARRIVAL): _DayWalk._break_end,
    (TrackerState.ON_BREAK, EventKind.DEPARTURE): _DayWalk._break_departure,
    (TrackerState.ON_BREAK, EventKind.BREAK): _DayWalk._break_end,
}
for _state in TrackerState:
    # Vacation/Sick only annotate the day.
    _TRANSITIONS[(_state, EventKind.VACATION)] = _DayWalk._ignore
    _TRANSITIONS[(_state, EventKind.SICK)] = _DayWalk._ignore


def sort_events(events: Iterable[AttendanceEvent]) -> list[AttendanceEvent]:
    return sorted(events, key=lambda e: e.timestamp)


class TimeAccountant:
    """Turns one day's events into worked and break minutes.

    Events are walked in ascending timestamp order through the states
    IDLE -> WORKING -> ON_BREAK. Intervals still open after the last event
    of the day contribute nothing.
    """

    def _walk(self, events: Iterable[AttendanceEvent]) -> _DayWalk:
        walk = _DayWalk()
        for event in sort_events(events):
            walk.step(event)
        return walk

    def account_day(self, events: Iterable[AttendanceEvent]) -> DayTotals:
        walk = self._walk(events)
        return DayTotals(worked_minutes=walk.worked, break_minutes=walk.on_break)

    def final_state(self, events: Iterable[AttendanceEvent]) -> TrackerState:
        return self._walk(events).state
