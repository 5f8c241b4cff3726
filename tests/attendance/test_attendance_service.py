from __future__ import annotations

from datetime import date, datetime

import pytest

from src.attendance_ledger.attendance_ledger.attendance.model import AttendanceEvent
from src.attendance_ledger.attendance_ledger.core.enums import EventKind, Presence
from src.attendance_ledger.attendance_ledger.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from src.attendance_ledger.attendance_ledger.storage.record_store import records_key


def ev(kind: EventKind, when: str, **kw) -> AttendanceEvent:
    return AttendanceEvent(kind=kind, timestamp=datetime.fromisoformat(when), **kw)


@pytest.fixture
def svc(container):
    return container.attendance_service


@pytest.fixture
def seeded(svc, admin_ctx):
    for event in (
        ev(EventKind.ARRIVAL, "2025-01-06T08:00"),
        ev(EventKind.DEPARTURE, "2025-01-06T16:00"),
        ev(EventKind.ARRIVAL, "2025-01-07T08:00"),
    ):
        assert svc.add_event(admin_ctx, "p1", event) is True
    return svc


def test_add_then_read(seeded):
    assert [e.timestamp.day for e in seeded.get_events("p1")] == [6, 6, 7]


def test_add_duplicate_identity_returns_false(seeded, admin_ctx, backend):
    before = backend.raw(records_key("p1"))

    assert seeded.add_event(admin_ctx, "p1", ev(EventKind.ARRIVAL, "2025-01-06T08:00", is_custom=True)) is False
    assert backend.raw(records_key("p1")) == before


def test_update_replaces_matching_event(seeded, admin_ctx):
    old = ev(EventKind.DEPARTURE, "2025-01-06T16:00")
    new = ev(EventKind.DEPARTURE, "2025-01-06T17:00", is_custom=True)

    assert seeded.update_event(admin_ctx, "p1", old, new) is True

    events = seeded.get_events("p1")
    assert new in events
    assert seeded.find_event("p1", EventKind.DEPARTURE, old.timestamp) is None


def test_update_without_match_returns_false(seeded, admin_ctx, backend):
    before = backend.raw(records_key("p1"))
    missing = ev(EventKind.BREAK, "2025-01-06T12:00")

    assert seeded.update_event(admin_ctx, "p1", missing, missing.with_changes(kind=EventKind.ARRIVAL)) is False
    assert backend.raw(records_key("p1")) == before


def test_delete_without_match_leaves_storage_unchanged(seeded, admin_ctx, backend):
    before = backend.raw(records_key("p1"))

    # Same time, different kind: not the same event.
    assert seeded.delete_event(admin_ctx, "p1", ev(EventKind.DEPARTURE, "2025-01-06T08:00")) is False
    assert backend.raw(records_key("p1")) == before


def test_delete_removes_matching_event(seeded, admin_ctx):
    assert seeded.delete_event(admin_ctx, "p1", ev(EventKind.ARRIVAL, "2025-01-07T08:00")) is True
    assert len(seeded.get_events("p1")) == 2


def test_delete_day(seeded, admin_ctx, backend):
    assert seeded.delete_day(admin_ctx, "p1", date(2025, 1, 6)) is True
    assert [e.timestamp.day for e in seeded.get_events("p1")] == [7]

    before = backend.raw(records_key("p1"))
    assert seeded.delete_day(admin_ctx, "p1", date(2025, 1, 20)) is False
    assert backend.raw(records_key("p1")) == before


def test_edit_event_records_what_changed(seeded, admin_ctx):
    old = ev(EventKind.DEPARTURE, "2025-01-06T16:00")

    assert seeded.edit_event(admin_ctx, "p1", old, kind=EventKind.BREAK, at=datetime(2025, 1, 6, 15, 30)) is True

    edited = seeded.find_event("p1", EventKind.BREAK, datetime(2025, 1, 6, 15, 30))
    assert edited.is_custom is True
    assert edited.change_note == 'Type changed from "Departure" to "Break", Time changed from "16:00" to "15:30"'


def test_manual_add_is_annotated(svc, admin_ctx):
    assert svc.add_manual_event(admin_ctx, "p1", EventKind.ARRIVAL, at=datetime(2025, 1, 6, 7, 45)) is True

    event = svc.get_events("p1")[0]
    assert event.is_custom is True
    assert event.change_note == 'Manually added "Arrival" entry (6.1.2025 07:45)'


def test_kiosk_cannot_edit_history(seeded, kiosk_ctx):
    with pytest.raises(AuthorizationError):
        seeded.delete_event(kiosk_ctx, "p1", ev(EventKind.ARRIVAL, "2025-01-07T08:00"))
    with pytest.raises(AuthorizationError):
        seeded.add_event(kiosk_ctx, "p1", ev(EventKind.ARRIVAL, "2025-01-08T08:00"))


def test_logged_out_session_is_rejected(container, svc, admin_ctx):
    container.auth_service.logout(admin_ctx.token)
    with pytest.raises(AuthenticationError):
        svc.delete_day(admin_ctx, "p1", date(2025, 1, 6))


def test_tap_records_now(svc, kiosk_ctx, fixed_now):
    event = svc.record_tap(kiosk_ctx, "p1", EventKind.ARRIVAL, now=fixed_now.replace(microsecond=123))

    assert event.timestamp == fixed_now
    assert svc.presence("p1") == Presence.PRESENT
    with pytest.raises(ValidationError):
        svc.record_tap(kiosk_ctx, "p1", EventKind.ARRIVAL, now=fixed_now)


def test_tap_rejects_absence_kinds(svc, kiosk_ctx):
    with pytest.raises(ValidationError):
        svc.record_tap(kiosk_ctx, "p1", EventKind.SICK)


def test_custom_time_only_for_arrival_and_departure(svc, kiosk_ctx):
    event = svc.record_custom(kiosk_ctx, "p1", EventKind.DEPARTURE, at=datetime(2025, 1, 6, 16, 0, 42))
    assert event.is_custom and event.timestamp == datetime(2025, 1, 6, 16, 0)

    with pytest.raises(ValidationError):
        svc.record_custom(kiosk_ctx, "p1", EventKind.BREAK, at=datetime(2025, 1, 6, 12, 0))


def test_absence_range_adds_one_all_day_event_per_day(svc, kiosk_ctx):
    added = svc.record_absence(kiosk_ctx, "p1", EventKind.VACATION, start=date(2025, 1, 30), end=date(2025, 2, 2))

    events = svc.get_events("p1")
    assert added == 4
    assert [e.timestamp for e in events] == [
        datetime(2025, 1, 30),
        datetime(2025, 1, 31),
        datetime(2025, 2, 1),
        datetime(2025, 2, 2),
    ]
    assert all(e.all_day and e.is_special for e in events)

    # Re-entering an overlapping range only adds the new day.
    assert svc.record_absence(kiosk_ctx, "p1", EventKind.VACATION, start=date(2025, 2, 2), end=date(2025, 2, 3)) == 1


def test_absence_range_validation(svc, kiosk_ctx):
    with pytest.raises(ValidationError):
        svc.record_absence(kiosk_ctx, "p1", EventKind.SICK, start=date(2025, 1, 5), end=date(2025, 1, 4))
    with pytest.raises(ValidationError):
        svc.record_absence(kiosk_ctx, "p1", EventKind.ARRIVAL, start=date(2025, 1, 5))


@pytest.mark.parametrize(
    "kinds, expected",
    [
        ([], Presence.ABSENT),
        ([EventKind.ARRIVAL], Presence.PRESENT),
        ([EventKind.ARRIVAL, EventKind.BREAK], Presence.PRESENT),
        ([EventKind.ARRIVAL, EventKind.DEPARTURE], Presence.ABSENT),
        ([EventKind.ARRIVAL, EventKind.BREAK, EventKind.BREAK], Presence.ABSENT),
    ],
)
def test_presence_follows_latest_events(svc, admin_ctx, kinds, expected):
    for minute, kind in enumerate(kinds):
        svc.add_event(admin_ctx, "p1", AttendanceEvent(kind=kind, timestamp=datetime(2025, 1, 6, 8, minute)))

    assert svc.presence("p1") == expected


def test_concurrent_writer_conflict_is_detected(container, svc, admin_ctx):
    store = container.store
    stale = store.load_events("p1")

    svc.add_event(admin_ctx, "p1", ev(EventKind.ARRIVAL, "2025-01-06T08:00"))

    with pytest.raises(ConflictError):
        store.put_events("p1", [*stale.events, ev(EventKind.BREAK, "2025-01-06T12:00")], expected_version=stale.version)
    assert [e.kind for e in svc.get_events("p1")] == [EventKind.ARRIVAL]


def test_update_onto_existing_identity_returns_false(seeded, admin_ctx, backend):
    before = backend.raw(records_key("p1"))
    old = ev(EventKind.ARRIVAL, "2025-01-07T08:00")

    assert seeded.update_event(admin_ctx, "p1", old, old.with_changes(timestamp=datetime(2025, 1, 6, 8, 0))) is False
    assert backend.raw(records_key("p1")) == before


def test_update_keeping_identity_is_allowed(seeded, admin_ctx):
    old = ev(EventKind.ARRIVAL, "2025-01-07T08:00")
    assert seeded.update_event(admin_ctx, "p1", old, old.with_changes(is_custom=True)) is True


def test_status_reports_last_arrival_only_while_present(svc, admin_ctx):
    for kind, when in (
        (EventKind.ARRIVAL, "2025-01-06T08:00"),
        (EventKind.DEPARTURE, "2025-01-06T12:00"),
        (EventKind.ARRIVAL, "2025-01-06T13:15"),
    ):
        svc.add_event(admin_ctx, "p1", ev(kind, when))

    assert svc.status("p1") == (Presence.PRESENT, datetime(2025, 1, 6, 13, 15))

    svc.add_event(admin_ctx, "p1", ev(EventKind.DEPARTURE, "2025-01-06T17:00"))
    assert svc.status("p1") == (Presence.ABSENT, None)
