from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import MANUAL_EDIT_NOTE
from ..core.enums import EventKind, Presence
from ..core.exceptions import ValidationError
from ..storage.record_store import RecordStore
from ..users.model import AuthContext
from ..users.service import AuthService
from .accounting import sort_events
from .model import AttendanceEvent

logger = logging.getLogger(__name__)

KIND_LABELS = {
    EventKind.ARRIVAL: "Arrival",
    EventKind.DEPARTURE: "Departure",
    EventKind.BREAK: "Break",
    EventKind.VACATION: "Vacation",
    EventKind.SICK: "Sick",
}

TAP_KINDS = (EventKind.ARRIVAL, EventKind.DEPARTURE, EventKind.BREAK)
ABSENCE_KINDS = (EventKind.VACATION, EventKind.SICK)

# Longest vacation/sick range accepted in one call.
MAX_ABSENCE_DAYS = 366


def presence_of(events: Iterable[AttendanceEvent]) -> Presence:
    """Present when the latest event is an arrival, or a break right after one."""

    latest = sort_events(events)[::-1]
    if not latest:
        return Presence.ABSENT
    if latest[0].kind == EventKind.ARRIVAL:
        return Presence.PRESENT
    if latest[0].kind == EventKind.BREAK and len(latest) > 1 and latest[1].kind == EventKind.ARRIVAL:
        return Presence.PRESENT
    return Presence.ABSENT


def last_arrival_of(events: Iterable[AttendanceEvent]) -> Optional[datetime]:
    arrivals = [e.timestamp for e in events if e.kind == EventKind.ARRIVAL]
    return max(arrivals, default=None)


def describe_edit(old: AttendanceEvent, *, kind: EventKind, at: datetime) -> str:
    changes = []
    if kind != old.kind:
        changes.append(f'Type changed from "{KIND_LABELS[old.kind]}" to "{KIND_LABELS[kind]}"')
    if at.date() != old.timestamp.date():
        changes.append(f'Date changed from "{old.timestamp:%d.%m.%Y}" to "{at:%d.%m.%Y}"')
    if at.strftime("%H:%M") != old.timestamp.strftime("%H:%M"):
        changes.append(f'Time changed from "{old.timestamp:%H:%M}" to "{at:%H:%M}"')
    return ", ".join(changes) or MANUAL_EDIT_NOTE


class AttendanceService:
    """Use cases over one person's event list.

    Every write is read-whole-list, mutate, compare-and-swap write; a
    concurrent writer makes the second write fail with ConflictError
    instead of silently losing the first change. Identity operations return
    False when no event matches and then do not write at all.
    """

    def __init__(
        self,
        store: RecordStore,
        auth: AuthService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._store = store
        self._auth = auth
        self._clock = clock

    def get_events(self, person_id: str) -> list[AttendanceEvent]:
        return self._store.get_events(person_id)

    def find_event(self, person_id: str, kind: EventKind, timestamp: datetime) -> Optional[AttendanceEvent]:
        return next((e for e in self._store.get_events(person_id) if e.identity == (timestamp, kind)), None)

    def presence(self, person_id: str) -> Presence:
        return presence_of(self._store.get_events(person_id))

    def status(self, person_id: str) -> tuple[Presence, Optional[datetime]]:
        """Presence plus the latest arrival time, which is only reported while present."""

        events = self._store.get_events(person_id)
        presence = presence_of(events)
        return presence, last_arrival_of(events) if presence == Presence.PRESENT else None

    # Quick actions (any open session)

    def record_tap(self, ctx: AuthContext, person_id: str, kind: EventKind, *, now: Optional[datetime] = None) -> AttendanceEvent:
        self._auth.require_session(ctx)
        if kind not in TAP_KINDS:
            raise ValidationError(f"{KIND_LABELS[kind]} cannot be recorded as a quick action")

        event = AttendanceEvent(kind=kind, timestamp=(now or self._clock()).replace(microsecond=0))
        if not self._append(person_id, [event]):
            raise ValidationError("This entry already exists")
        return event

    def record_custom(self, ctx: AuthContext, person_id: str, kind: EventKind, *, at: datetime) -> AttendanceEvent:
        """Arrival/departure at a time other than now (flagged as manually modified)."""

        self._auth.require_session(ctx)
        if kind not in (EventKind.ARRIVAL, EventKind.DEPARTURE):
            raise ValidationError("Only arrival or departure can be entered with a custom time")

        event = AttendanceEvent(kind=kind, timestamp=at.replace(second=0, microsecond=0), is_custom=True)
        if not self._append(person_id, [event]):
            raise ValidationError("This entry already exists")
        return event

    def record_absence(self, ctx: AuthContext, person_id: str, kind: EventKind, *, start: date, end: Optional[date] = None) -> int:
        """Add one all-day vacation/sick event per day in [start, end]; returns how many were added."""

        self._auth.require_session(ctx)
        if kind not in ABSENCE_KINDS:
            raise ValidationError("Only vacation or sick leave can span whole days")
        end = end or start
        if end < start:
            raise ValidationError("End date is before start date")
        if (end - start).days >= MAX_ABSENCE_DAYS:
            raise ValidationError(f"A range may cover at most {MAX_ABSENCE_DAYS} days")

        events = [
            AttendanceEvent(
                kind=kind,
                timestamp=datetime.combine(start + timedelta(days=i), time.min),
                is_special=True,
                all_day=True,
            )
            for i in range((end - start).days + 1)
        ]
        return self._append(person_id, events)

    # Identity operations (admin)

    def add_event(self, ctx: AuthContext, person_id: str, event: AttendanceEvent) -> bool:
        self._auth.require_admin(ctx)
        return self._append(person_id, [event]) == 1

    def add_manual_event(self, ctx: AuthContext, person_id: str, kind: EventKind, *, at: datetime) -> bool:
        at = at.replace(second=0, microsecond=0)
        note = f'Manually added "{KIND_LABELS[kind]}" entry ({at.day}.{at.month}.{at.year} {at:%H:%M})'
        event = AttendanceEvent(
            kind=kind,
            timestamp=at,
            is_custom=True,
            is_special=kind in ABSENCE_KINDS,
            all_day=False,
            change_note=note,
        )
        return self.add_event(ctx, person_id, event)

    def update_event(self, ctx: AuthContext, person_id: str, old: AttendanceEvent, new: AttendanceEvent) -> bool:
        self._auth.require_admin(ctx)
        current = self._store.load_events(person_id)

        index = next((i for i, e in enumerate(current.events) if e.matches(old)), None)
        if index is None:
            logger.info("Update of %s for %s matched nothing", old.identity, person_id)
            return False
        if any(i != index and e.matches(new) for i, e in enumerate(current.events)):
            logger.info("Update of %s for %s would duplicate %s", old.identity, person_id, new.identity)
            return False

        events = list(current.events)
        events[index] = new
        self._store.put_events(person_id, events, expected_version=current.version)
        return True

    def edit_event(self, ctx: AuthContext, person_id: str, old: AttendanceEvent, *, kind: EventKind, at: datetime) -> bool:
        """Change kind and/or time of an event, recording what changed."""

        at = at.replace(second=0, microsecond=0)
        new = old.with_changes(kind=kind, timestamp=at, is_custom=True, change_note=describe_edit(old, kind=kind, at=at))
        return self.update_event(ctx, person_id, old, new)

    def delete_event(self, ctx: AuthContext, person_id: str, target: AttendanceEvent) -> bool:
        self._auth.require_admin(ctx)
        current = self._store.load_events(person_id)

        index = next((i for i, e in enumerate(current.events) if e.matches(target)), None)
        if index is None:
            logger.info("Delete of %s for %s matched nothing", target.identity, person_id)
            return False

        events = current.events[:index] + current.events[index + 1:]
        self._store.put_events(person_id, events, expected_version=current.version)
        return True

    def delete_day(self, ctx: AuthContext, person_id: str, day: date) -> bool:
        self._auth.require_admin(ctx)
        current = self._store.load_events(person_id)

        events = [e for e in current.events if e.timestamp.date() != day]
        if len(events) == len(current.events):
            return False

        self._store.put_events(person_id, events, expected_version=current.version)
        logger.info("Deleted %d events of %s for %s", len(current.events) - len(events), day, person_id)
        return True

    def _append(self, person_id: str, new_events: list[AttendanceEvent]) -> int:
        current = self._store.load_events(person_id)
        known = {e.identity for e in current.events}

        fresh = []
        for event in new_events:
            if event.identity not in known:
                known.add(event.identity)
                fresh.append(event)
        if not fresh:
            return 0

        self._store.put_events(person_id, [*current.events, *fresh], expected_version=current.version)
        logger.info("Recorded %d event(s) for %s", len(fresh), person_id)
        return len(fresh)
