from __future__ import annotations

from flask import Flask, request, session

from ..common.web import (
    SESSION_TOKEN_KEY,
    admin_required,
    current_context,
    json_body,
    fail,
    ok,
    require_field,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    people = container.person_service
    admin_only = admin_required(container)

    @app.route("/api/session", methods=["GET"], endpoint="session_info")
    def session_info():
        ctx = current_context(container)
        return ok(role=ctx.role.value, expires_at=ctx.expires_at.isoformat())

    @app.route("/api/session", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        ctx = auth.login_admin(str(data.get("password", "")))

        auth.logout(session.get(SESSION_TOKEN_KEY))
        session[SESSION_TOKEN_KEY] = ctx.token
        return ok(role=ctx.role.value, expires_at=ctx.expires_at.isoformat())

    @app.route("/api/session", methods=["DELETE"], endpoint="logout")
    def logout():
        auth.logout(session.pop(SESSION_TOKEN_KEY, None))
        session.clear()
        return ok(message="Signed out")

    @app.route("/api/admin/password", methods=["PUT"], endpoint="change_password")
    @admin_only
    def change_password():
        data = json_body()
        auth.change_password(
            current_context(container),
            new_password=str(require_field(data, "password")),
            confirm_password=str(data.get("confirm", "")),
        )
        return ok(message="Password changed")

    @app.route("/api/people", methods=["GET"], endpoint="list_people")
    def list_people():
        return ok(people=[p.to_dict() for p in people.list_people()])

    @app.route("/api/people", methods=["POST"], endpoint="add_person")
    @admin_only
    def add_person():
        data = json_body()
        person = people.add_person(current_context(container), name=str(data.get("name", "")))
        return ok(201, person=person.to_dict())

    @app.route("/api/people/<person_id>", methods=["PUT"], endpoint="rename_person")
    @admin_only
    def rename_person(person_id: str):
        data = json_body()
        if not people.rename_person(current_context(container), person_id=person_id, name=str(data.get("name", ""))):
            return fail("Person not found")
        return ok(person={"id": person_id, "name": str(data["name"]).strip()})

    @app.route("/api/people/<person_id>", methods=["DELETE"], endpoint="delete_person")
    @admin_only
    def delete_person(person_id: str):
        drop = request.args.get("drop_events") in {"1", "true", "yes"}
        if not people.delete_person(current_context(container), person_id=person_id, drop_events=drop):
            return fail("Person not found")
        return ok(message="Person deleted")
