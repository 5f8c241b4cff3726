from __future__ import annotations

import importlib
import sys
from datetime import date, datetime, time, timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_ledger.attendance_ledger.attendance.model import AttendanceEvent
from src.attendance_ledger.attendance_ledger.container import build_container
from src.attendance_ledger.attendance_ledger.core.enums import EventKind
from src.attendance_ledger.attendance_ledger.core.constants import DEFAULT_ADMIN_PASSWORD

DEMO_PEOPLE = ["Jana Novakova", "Petr Svoboda"]


def _demo_week(today: date) -> list[AttendanceEvent]:
    events = []
    for offset in range(1, 8):
        day = today - timedelta(days=offset)
        at = lambda h, m: datetime.combine(day, time(h, m))
        events += [
            AttendanceEvent(kind=EventKind.ARRIVAL, timestamp=at(8, 0)),
            AttendanceEvent(kind=EventKind.BREAK, timestamp=at(12, 0)),
            AttendanceEvent(kind=EventKind.BREAK, timestamp=at(12, 30)),
            AttendanceEvent(kind=EventKind.DEPARTURE, timestamp=at(16, 0)),
        ]
    return events


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), store_backend=settings.STORE_BACKEND)

    admin = container.auth_service.login_admin(DEFAULT_ADMIN_PASSWORD)
    existing = {p.name for p in container.person_service.list_people()}
    for name in DEMO_PEOPLE:
        if name in existing:
            continue
        person = container.person_service.add_person(admin, name=name)
        for event in _demo_week(date.today()):
            container.attendance_service.add_event(admin, person.person_id, event)

    print(f"OK: Seeded {len(DEMO_PEOPLE)} demo people ({settings.STORE_BACKEND})")


if __name__ == "__main__":
    main()
