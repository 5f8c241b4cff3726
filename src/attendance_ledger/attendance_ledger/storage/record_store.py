from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.model import AttendanceEvent
from ..core.constants import (
    ADMIN_SETTINGS_KEY,
    AUTO_REFRESH_KEY,
    DEFAULT_AUTO_REFRESH,
    LAST_MANUAL_REFRESH_KEY,
    PEOPLE_KEY,
    RATES_KEY,
    RECORDS_KEY_PREFIX,
)
from ..core.exceptions import MalformedEventError
from ..payroll.model import RateTable
from ..users.model import AdminSettings, Person
from .backend import KeyValueBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionedEvents:
    events: list[AttendanceEvent] = field(default_factory=list)
    version: int = 0


@dataclass(frozen=True)
class VersionedPeople:
    people: list[Person] = field(default_factory=list)
    version: int = 0


def records_key(person_id: str) -> str:
    return f"{RECORDS_KEY_PREFIX}:{person_id}"


class RecordStore:
    """Typed access to the key-value backend.

    Whole-list semantics: an event list is always read and written as one
    value. Writes that pass ``expected_version`` are rejected with
    ConflictError if another writer got there first; backend outages surface
    as StoreUnavailableError and are never turned into empty data.
    """

    def __init__(self, backend: KeyValueBackend):
        self._backend = backend

    # Events

    def load_events(self, person_id: str) -> VersionedEvents:
        stored = self._backend.read(records_key(person_id))
        if stored is None:
            return VersionedEvents()
        if not isinstance(stored.value, list):
            raise MalformedEventError(f"Stored events for {person_id} are not a list")
        return VersionedEvents(
            events=[AttendanceEvent.from_dict(item) for item in stored.value],
            version=stored.version,
        )

    def get_events(self, person_id: str) -> list[AttendanceEvent]:
        return self.load_events(person_id).events

    def put_events(
        self,
        person_id: str,
        events: Sequence[AttendanceEvent],
        *,
        expected_version: Optional[int] = None,
    ) -> int:
        version = self._backend.write(
            records_key(person_id),
            [e.to_dict() for e in events],
            expected_version=expected_version,
        )
        logger.debug("Saved %d events for %s (v%d)", len(events), person_id, version)
        return version

    def drop_events(self, person_id: str) -> bool:
        return self._backend.delete(records_key(person_id))

    # Rates

    def get_rates(self) -> RateTable:
        stored = self._backend.read(RATES_KEY)
        if stored is None:
            return RateTable()
        return RateTable.from_dict(stored.value)

    def put_rates(self, rates: RateTable) -> None:
        self._backend.write(RATES_KEY, rates.to_dict())
        logger.info("Rates saved: weekday=%s weekend=%s", rates.weekday_rate, rates.weekend_rate)

    # People

    def load_people(self) -> VersionedPeople:
        stored = self._backend.read(PEOPLE_KEY)
        if stored is None:
            return VersionedPeople()
        return VersionedPeople(people=[Person.from_dict(p) for p in stored.value], version=stored.version)

    def get_people(self) -> list[Person]:
        return self.load_people().people

    def put_people(self, people: Sequence[Person], *, expected_version: Optional[int] = None) -> int:
        return self._backend.write(PEOPLE_KEY, [p.to_dict() for p in people], expected_version=expected_version)

    # Settings

    def get_admin_settings(self) -> Optional[AdminSettings]:
        stored = self._backend.read(ADMIN_SETTINGS_KEY)
        if stored is None or not stored.value.get("password_hash"):
            return None
        return AdminSettings(password_hash=stored.value["password_hash"])

    def put_admin_settings(self, settings: AdminSettings) -> None:
        self._backend.write(ADMIN_SETTINGS_KEY, settings.to_dict())

    def get_auto_refresh(self) -> bool:
        stored = self._backend.read(AUTO_REFRESH_KEY)
        return DEFAULT_AUTO_REFRESH if stored is None else bool(stored.value)

    def put_auto_refresh(self, enabled: bool) -> None:
        self._backend.write(AUTO_REFRESH_KEY, bool(enabled))

    def mark_manual_refresh(self, when: datetime) -> None:
        self._backend.write(LAST_MANUAL_REFRESH_KEY, when.isoformat())

    def last_manual_refresh(self) -> Optional[str]:
        stored = self._backend.read(LAST_MANUAL_REFRESH_KEY)
        return None if stored is None else str(stored.value)

    def ping(self) -> bool:
        return self._backend.ping()
