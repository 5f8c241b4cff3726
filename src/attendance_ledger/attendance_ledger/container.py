from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.service import AttendanceService
from .core.constants import DEFAULT_SESSION_MINUTES
from .core.exceptions import ValidationError
from .database.connection import DBConfig, DatabaseConnection
from .payroll.service import PayrollReportService
from .settings.service import SettingsService
from .storage.backend import KeyValueBackend
from .storage.memory_backend import InMemoryBackend
from .storage.mysql_backend import MySQLBackend
from .storage.record_store import RecordStore
from .users.service import AuthService, PersonService


@dataclass(frozen=True)
class Container:
    backend: KeyValueBackend
    store: RecordStore

    auth_service: AuthService
    person_service: PersonService
    attendance_service: AttendanceService
    payroll_report_service: PayrollReportService
    settings_service: SettingsService


def build_backend(*, store_backend: str, db_config: Optional[dict] = None) -> KeyValueBackend:
    if store_backend == "memory":
        return InMemoryBackend()
    if store_backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config or {}))
        return MySQLBackend(conn)
    raise ValidationError(f"Unknown STORE_BACKEND: {store_backend!r}")


def build_container(
    *,
    db_config: Optional[dict] = None,
    store_backend: str = "mysql",
    session_minutes: int = DEFAULT_SESSION_MINUTES,
    backend: Optional[KeyValueBackend] = None,
) -> Container:
    if backend is None:
        backend = build_backend(store_backend=store_backend, db_config=db_config)
    store = RecordStore(backend)

    auth_service = AuthService(store, session_minutes=session_minutes)
    person_service = PersonService(store, auth_service)
    attendance_service = AttendanceService(store, auth_service)
    payroll_report_service = PayrollReportService(store)
    settings_service = SettingsService(store, auth_service)

    return Container(
        backend=backend,
        store=store,
        auth_service=auth_service,
        person_service=person_service,
        attendance_service=attendance_service,
        payroll_report_service=payroll_report_service,
        settings_service=settings_service,
    )
