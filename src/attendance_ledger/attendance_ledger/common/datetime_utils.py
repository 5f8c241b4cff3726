from __future__ import annotations

from datetime import date, datetime

from ..core.constants import (
    DATE_KEY_FORMAT,
    DISPLAY_DATE_FORMAT,
    DISPLAY_TIME_FORMAT,
    MONTH_KEY_FORMAT,
    WEEKEND_DAYS,
)
from ..core.exceptions import MalformedEventError, ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, DATE_KEY_FORMAT).date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r}") from None


def parse_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM string into (year, month)."""
    try:
        parsed = datetime.strptime(value, MONTH_KEY_FORMAT)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid month: {value!r}") from None
    return parsed.year, parsed.month


def parse_timestamp(value) -> datetime:
    """Parse an ISO-8601 timestamp into a naive local datetime.

    Aware values (e.g. ``2025-01-06T07:00:00.000Z``) are converted to the
    local timezone first; naive values are taken as local already.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise MalformedEventError(f"Unparseable timestamp: {value!r}") from None
    else:
        raise MalformedEventError(f"Unparseable timestamp: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def date_key(moment: datetime | date) -> str:
    return moment.strftime(DATE_KEY_FORMAT)


def is_weekend(day: date) -> bool:
    return day.weekday() in WEEKEND_DAYS


def format_date(day: date) -> str:
    return day.strftime(DISPLAY_DATE_FORMAT)


def format_time(moment: datetime) -> str:
    return moment.strftime(DISPLAY_TIME_FORMAT)


def format_minutes(minutes: int) -> str:
    """Format a duration as ``Xh Ym``."""
    minutes = int(minutes)
    return f"{minutes // 60}h {minutes % 60}m"


def format_money(amount: float) -> str:
    return f"{amount:.2f}"


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
