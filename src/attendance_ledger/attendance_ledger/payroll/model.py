from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import format_minutes, format_money
from ..common.validators import require_non_negative_number
from ..core.constants import DEFAULT_WEEKDAY_RATE, DEFAULT_WEEKEND_RATE


@dataclass(frozen=True)
class RateTable:
    """Hourly rates (currency per hour) for weekdays and weekends."""

    weekday_rate: float = DEFAULT_WEEKDAY_RATE
    weekend_rate: float = DEFAULT_WEEKEND_RATE

    def __post_init__(self):
        object.__setattr__(self, "weekday_rate", require_non_negative_number(self.weekday_rate, "Weekday rate"))
        object.__setattr__(self, "weekend_rate", require_non_negative_number(self.weekend_rate, "Weekend rate"))

    def rate_for(self, *, weekend: bool) -> float:
        return self.weekend_rate if weekend else self.weekday_rate

    def to_dict(self) -> dict[str, float]:
        return {"weekday": self.weekday_rate, "weekend": self.weekend_rate}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RateTable":
        return cls(
            weekday_rate=data.get("weekday", DEFAULT_WEEKDAY_RATE),
            weekend_rate=data.get("weekend", DEFAULT_WEEKEND_RATE),
        )


@dataclass(frozen=True)
class DaySummary:
    """Derived per-day figures; recomputed on every read, never stored."""

    date: date
    worked_minutes: int
    break_minutes: int
    is_weekend: bool
    earnings: float
    has_custom_entry: bool = False
    has_special_entry: bool = False
    special_label: Optional[str] = None


@dataclass(frozen=True)
class DayReportRow:
    """Read-model for one report line (pre-formatted for UI/export)."""

    day_key: str
    date_label: str
    arrivals: list[str]
    departures: list[str]
    breaks: list[str]
    worked_label: str
    break_label: str
    earnings_label: str
    summary: DaySummary
    annotation: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.day_key,
            "date_label": self.date_label,
            "arrivals": list(self.arrivals),
            "departures": list(self.departures),
            "breaks": list(self.breaks),
            "worked_minutes": self.summary.worked_minutes,
            "break_minutes": self.summary.break_minutes,
            "worked": self.worked_label,
            "break": self.break_label,
            "is_weekend": self.summary.is_weekend,
            "earnings": round(self.summary.earnings, 2),
            "earnings_label": self.earnings_label,
            "has_custom_entry": self.summary.has_custom_entry,
            "has_special_entry": self.summary.has_special_entry,
            "special_label": self.summary.special_label,
            "annotation": self.annotation,
        }


@dataclass(frozen=True)
class AttendanceReport:
    rows: list[DayReportRow] = field(default_factory=list)
    total_worked_minutes: int = 0
    total_break_minutes: int = 0
    total_earnings: float = 0.0

    @property
    def total_worked_hours(self) -> float:
        return self.total_worked_minutes / 60

    @property
    def total_worked_label(self) -> str:
        return format_minutes(self.total_worked_minutes)

    @property
    def total_break_label(self) -> str:
        return format_minutes(self.total_break_minutes)

    @property
    def total_earnings_label(self) -> str:
        return format_money(self.total_earnings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows": [r.to_dict() for r in self.rows],
            "totals": {
                "worked_minutes": self.total_worked_minutes,
                "break_minutes": self.total_break_minutes,
                "worked_hours": round(self.total_worked_hours, 2),
                "worked": self.total_worked_label,
                "break": self.total_break_label,
                "earnings": round(self.total_earnings, 2),
                "earnings_label": self.total_earnings_label,
            },
        }
