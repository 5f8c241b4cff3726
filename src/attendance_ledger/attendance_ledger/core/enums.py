from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role carried by a session token."""

    ADMIN = "admin"
    KIOSK = "kiosk"


class EventKind(str, Enum):
    """Kind of an attendance event, stored as the ``type`` field."""

    ARRIVAL = "arrival"
    DEPARTURE = "departure"
    BREAK = "break"
    VACATION = "vacation"
    SICK = "sick"

    @property
    def is_special(self) -> bool:
        return self in (EventKind.VACATION, EventKind.SICK)


class TrackerState(str, Enum):
    """States of the per-day time accounting machine."""

    IDLE = "IDLE"
    WORKING = "WORKING"
    ON_BREAK = "ON_BREAK"


class Presence(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
