from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import format_time, parse_iso_date
from ..common.web import (
    admin_required,
    current_context,
    json_body,
    kind_field,
    fail,
    ok,
    require_field,
    timestamp_field,
)
from ..container import Container
from .model import parse_kind


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service
    people = container.person_service
    admin_only = admin_required(container)

    def _person_exists(person_id: str) -> bool:
        return people.get_person(person_id) is not None

    @app.route("/api/people/status", methods=["GET"], endpoint="people_status")
    def people_status():
        rows = []
        for person in people.list_people():
            presence, since = attendance.status(person.person_id)
            rows.append({**person.to_dict(), "presence": presence.value, "since": format_time(since) if since else None})
        return ok(people=rows)

    @app.route("/api/people/<person_id>/events", methods=["GET"], endpoint="list_events")
    def list_events(person_id: str):
        if not _person_exists(person_id):
            return fail("Person not found")
        events = sorted(attendance.get_events(person_id), key=lambda e: e.timestamp, reverse=True)
        return ok(events=[e.to_dict() for e in events])

    @app.route("/api/people/<person_id>/taps/<kind>", methods=["POST"], endpoint="record_tap")
    def record_tap(person_id: str, kind: str):
        if not _person_exists(person_id):
            return fail("Person not found")
        event = attendance.record_tap(current_context(container), person_id, parse_kind(kind))
        return ok(201, event=event.to_dict())

    @app.route("/api/people/<person_id>/custom", methods=["POST"], endpoint="record_custom")
    def record_custom(person_id: str):
        if not _person_exists(person_id):
            return fail("Person not found")
        data = json_body()
        event = attendance.record_custom(
            current_context(container), person_id, kind_field(data), at=timestamp_field(data)
        )
        return ok(201, event=event.to_dict())

    @app.route("/api/people/<person_id>/absences", methods=["POST"], endpoint="record_absence")
    def record_absence(person_id: str):
        if not _person_exists(person_id):
            return fail("Person not found")
        data = json_body()
        start = parse_iso_date(str(require_field(data, "start")))
        end = parse_iso_date(str(data["end"])) if data.get("end") else start
        added = attendance.record_absence(current_context(container), person_id, kind_field(data), start=start, end=end)
        return ok(201, added=added)

    @app.route("/api/people/<person_id>/events", methods=["POST"], endpoint="add_event")
    @admin_only
    def add_event(person_id: str):
        if not _person_exists(person_id):
            return fail("Person not found")
        data = json_body()
        if not attendance.add_manual_event(current_context(container), person_id, kind_field(data), at=timestamp_field(data)):
            return fail("An identical entry already exists", 409)
        return ok(201, message="Entry added")

    @app.route("/api/people/<person_id>/events", methods=["PUT"], endpoint="edit_event")
    @admin_only
    def edit_event(person_id: str):
        data = json_body()
        old_data = require_field(data, "old")
        if not isinstance(old_data, dict):
            return fail("Field 'old' must be an object", 400)

        old = attendance.find_event(person_id, kind_field(old_data), timestamp_field(old_data))
        if old is None:
            return fail("Entry not found")
        if not attendance.edit_event(current_context(container), person_id, old, kind=kind_field(data), at=timestamp_field(data)):
            return fail("An identical entry already exists", 409)
        return ok(message="Entry updated")

    @app.route("/api/people/<person_id>/events", methods=["DELETE"], endpoint="delete_event")
    @admin_only
    def delete_event(person_id: str):
        data = json_body()
        target = attendance.find_event(person_id, kind_field(data), timestamp_field(data))
        if target is None or not attendance.delete_event(current_context(container), person_id, target):
            return fail("Entry not found")
        return ok(message="Entry deleted")

    @app.route("/api/people/<person_id>/days/<day>", methods=["DELETE"], endpoint="delete_day")
    @admin_only
    def delete_day(person_id: str, day: str):
        if not attendance.delete_day(current_context(container), person_id, parse_iso_date(day)):
            return fail("No entries for that day")
        return ok(message="Day deleted")
