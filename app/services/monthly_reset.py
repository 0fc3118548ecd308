"""Monthly rollover and monthly statistics.

``MonthlyResetService`` is built per request. Its ``loading`` and ``error``
attributes describe the calls made through that instance only: ``loading``
is true while a call is in flight and ``error`` keeps the message of the
most recent failure. A later success does not clear ``error``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.orm import Session

from app.errors import UnauthorizedError, error_message
from app.services import data_service

logger = logging.getLogger(__name__)

SET_BASE_EQUITY_FAILED = "Failed to set base equity"
RESET_FAILED = "Failed to reset monthly performance"
MONTHLY_STATS_FAILED = "Failed to get monthly stats"
CURRENT_MONTH_STATS_FAILED = "Failed to get current month stats"


class MonthlyResetService:
    def __init__(self, db: Session, is_admin: bool, actor: str | None = None) -> None:
        self.db = db
        self.is_admin = is_admin
        self.actor = actor
        self.loading = False
        self.error: str | None = None

    @contextmanager
    def _in_flight(self) -> Iterator[None]:
        self.loading = True
        try:
            yield
        finally:
            self.loading = False

    def _require_admin(self) -> None:
        if not self.is_admin:
            raise UnauthorizedError("Unauthorized")

    def _record(self, exc: Exception, fallback: str) -> None:
        self.error = error_message(exc, fallback)

    def set_monthly_base_equity(self, month: int, year: int, base_equity: float) -> Any:
        self._require_admin()
        with self._in_flight():
            try:
                result = data_service.rpc(
                    self.db,
                    "set_monthly_base_equity",
                    {"p_month": month, "p_year": year, "p_base_equity": base_equity},
                    commit=True,
                    actor=self.actor,
                )
            except Exception as exc:
                self._record(exc, SET_BASE_EQUITY_FAILED)
                raise
        logger.info("Base equity for %s/%s set to %s by %s", month, year, base_equity, self.actor or "admin")
        return result

    def reset_monthly_performance(self, new_month: int, new_year: int) -> Any:
        self._require_admin()
        with self._in_flight():
            try:
                result = data_service.rpc(
                    self.db,
                    "reset_monthly_performance",
                    {"p_new_month": new_month, "p_new_year": new_year},
                    commit=True,
                    actor=self.actor,
                )
            except Exception as exc:
                self._record(exc, RESET_FAILED)
                raise
        logger.info("Monthly performance reset for %s/%s by %s", new_month, new_year, self.actor or "admin")
        return result

    def get_monthly_stats(self, month: int | None = None, year: int | None = None) -> dict[str, Any] | None:
        with self._in_flight():
            try:
                rows = data_service.rpc_rows(
                    self.db,
                    "get_monthly_dashboard_stats",
                    # 0 is not a valid month or year; treat it like "not given"
                    {"p_month": month or None, "p_year": year or None},
                )
            except Exception as exc:
                self._record(exc, MONTHLY_STATS_FAILED)
                raise
        return rows[0] if rows else None

    def get_current_month_stats(self) -> dict[str, Any]:
        # ``loading`` is left untouched for this read.
        try:
            return data_service.select_single(self.db, "current_month_dashboard")
        except Exception as exc:
            self._record(exc, CURRENT_MONTH_STATS_FAILED)
            raise
