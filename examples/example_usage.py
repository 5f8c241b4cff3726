"""Example: build a report through the service layer (no Flask, no MySQL)."""

from datetime import datetime

from src.attendance_ledger.attendance_ledger.container import build_container
from src.attendance_ledger.attendance_ledger.core.constants import DEFAULT_ADMIN_PASSWORD
from src.attendance_ledger.attendance_ledger.core.enums import EventKind


def main():
    container = build_container(store_backend="memory")
    admin = container.auth_service.login_admin(DEFAULT_ADMIN_PASSWORD)
    person = container.person_service.add_person(admin, name="Demo")

    svc = container.attendance_service
    svc.add_manual_event(admin, person.person_id, EventKind.ARRIVAL, at=datetime(2025, 1, 4, 8, 0))
    svc.add_manual_event(admin, person.person_id, EventKind.DEPARTURE, at=datetime(2025, 1, 4, 12, 0))

    report = container.payroll_report_service.build_person_report(person.person_id)
    for row in report.rows:
        print(row.date_label, row.worked_label, row.earnings_label, row.annotation)
    print("TOTAL", report.total_worked_label, report.total_earnings_label)


if __name__ == "__main__":
    main()
