from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from ..model import RateTable


class EarningsCalculator(ABC):
    """Calculator interface (Strategy Pattern for pay rules)."""

    @abstractmethod
    def day_earnings(self, *, worked_minutes: int, day: date, rates: RateTable) -> float:
        raise NotImplementedError
