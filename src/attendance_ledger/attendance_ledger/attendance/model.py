from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_timestamp
from ..core.enums import EventKind
from ..core.exceptions import MalformedEventError


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one timestamped attendance event of a person.

    There is no surrogate id; ``(timestamp, kind)`` identifies the event for
    update/delete purposes.
    """

    kind: EventKind
    timestamp: datetime
    is_custom: bool = False
    is_special: bool = False
    all_day: bool = False
    change_note: Optional[str] = None

    @property
    def identity(self) -> tuple[datetime, EventKind]:
        return self.timestamp, self.kind

    def matches(self, other: "AttendanceEvent") -> bool:
        return self.identity == other.identity

    def with_changes(self, **changes) -> "AttendanceEvent":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.kind.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.is_custom:
            data["isCustom"] = True
        if self.is_special:
            data["isSpecial"] = True
        if self.all_day:
            data["allDay"] = True
        if self.change_note:
            data["changeLog"] = self.change_note
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttendanceEvent":
        if not isinstance(data, Mapping):
            raise MalformedEventError(f"Event must be an object, got {type(data).__name__}")
        return cls(
            kind=parse_kind(data.get("type")),
            timestamp=parse_timestamp(data.get("timestamp")),
            is_custom=bool(data.get("isCustom", False)),
            is_special=bool(data.get("isSpecial", False)),
            all_day=bool(data.get("allDay", False)),
            change_note=data.get("changeLog") or None,
        )


def parse_kind(value) -> EventKind:
    if isinstance(value, EventKind):
        return value
    try:
        return EventKind(str(value).strip().lower())
    except ValueError:
        raise MalformedEventError(f"Unknown event kind: {value!r}") from None
