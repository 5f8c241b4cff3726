from __future__ import annotations

from datetime import date

from ...common.datetime_utils import is_weekend
from ..model import RateTable
from .base import EarningsCalculator


class WeekdayWeekendCalculator(EarningsCalculator):
    """Standard rule: worked hours x (weekend rate on Sat/Sun, weekday rate otherwise)."""

    def day_earnings(self, *, worked_minutes: int, day: date, rates: RateTable) -> float:
        if worked_minutes <= 0:
            return 0.0
        return (worked_minutes / 60) * rates.rate_for(weekend=is_weekend(day))
