from __future__ import annotations

import io

from flask import Flask, send_file

from ..common.datetime_utils import parse_iso_date
from ..common.web import fail, ok, optional_arg
from ..container import Container
from .export import export_filename, report_to_csv


def register(app: Flask, container: Container) -> None:
    people = container.person_service
    reports = container.payroll_report_service

    def _build(person_id: str):
        start = optional_arg("start")
        end = optional_arg("end")
        return reports.build_person_report(
            person_id,
            month=optional_arg("month"),
            start=parse_iso_date(start) if start else None,
            end=parse_iso_date(end) if end else None,
        )

    @app.route("/api/people/<person_id>/report", methods=["GET"], endpoint="person_report")
    def person_report(person_id: str):
        person = people.get_person(person_id)
        if person is None:
            return fail("Person not found")
        return ok(person=person.to_dict(), report=_build(person_id).to_dict())

    @app.route("/api/people/<person_id>/report.csv", methods=["GET"], endpoint="person_report_csv")
    def person_report_csv(person_id: str):
        person = people.get_person(person_id)
        if person is None:
            return fail("Person not found")

        # Non-ASCII names also get an RFC 5987 filename*.
        return send_file(
            io.BytesIO(report_to_csv(_build(person_id))),
            mimetype="text/csv",
            as_attachment=True,
            download_name=export_filename(person.name),
        )
