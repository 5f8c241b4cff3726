from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from ..common.datetime_utils import now_local
from ..payroll.model import RateTable
from ..storage.record_store import RecordStore
from ..users.model import AuthContext
from ..users.service import AuthService

logger = logging.getLogger(__name__)


class SettingsService:
    """Use case: rates and system settings (writes are admin-only)."""

    def __init__(self, store: RecordStore, auth: AuthService, *, clock: Callable[[], datetime] = now_local):
        self._store = store
        self._auth = auth
        self._clock = clock

    def get_rates(self) -> RateTable:
        return self._store.get_rates()

    def update_rates(self, ctx: AuthContext, *, weekday_rate, weekend_rate) -> RateTable:
        self._auth.require_admin(ctx)
        rates = RateTable(weekday_rate=weekday_rate, weekend_rate=weekend_rate)
        self._store.put_rates(rates)
        return rates

    def get_auto_refresh(self) -> bool:
        return self._store.get_auto_refresh()

    def set_auto_refresh(self, ctx: AuthContext, *, enabled: bool) -> None:
        self._auth.require_admin(ctx)
        self._store.put_auto_refresh(enabled)

    def trigger_manual_refresh(self, ctx: AuthContext) -> datetime:
        self._auth.require_session(ctx)
        when = self._clock()
        self._store.mark_manual_refresh(when)
        logger.info("Manual refresh requested at %s", when.isoformat())
        return when

    def last_manual_refresh(self):
        return self._store.last_manual_refresh()

    def store_available(self) -> bool:
        return self._store.ping()
