from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.config import settings
from app.errors import DataServiceError
from app.services import data_service

logger = logging.getLogger(__name__)


def _number(row: dict[str, Any] | None, key: str) -> float:
    if not row:
        return 0
    value = row.get(key)
    return float(value) if value is not None else 0


def _first_row(db: Session, procedure: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
    """Best-effort read of an auxiliary procedure; failures are logged and yield ``None``."""
    try:
        rows = data_service.rpc_rows(db, procedure, params)
    except DataServiceError as exc:
        logger.warning("Dashboard section %s unavailable: %s", procedure, exc.detail or "no message")
        return None
    return rows[0] if rows else None


class DashboardService:
    @staticmethod
    def stats(db: Session, days_back: int | None = None) -> dict[str, Any]:
        with data_service.fallback_message("Failed to load dashboard stats"):
            main = data_service.select_single(db, "enhanced_dashboard_stats")
        target = _first_row(db, "calculate_equity_based_target")
        retention = _first_row(
            db, "get_retention_metrics", {"days_back": days_back or settings.retention_days_back}
        )

        equity = _number(main, "total_equity")
        monthly_target = _number(main, "monthly_target_nots")
        stats = {
            "total_clients": int(_number(main, "total_clients")),
            "total_margin_in": equity,
            "total_overall_margin": equity,
            "total_monthly_revenue": _number(main, "total_monthly_revenue"),
            "total_nots": _number(main, "total_nots"),
            "target_nots": round(monthly_target),
            "progress_percentage": _number(main, "progress_percentage"),
            "daily_target_nots": round(_number(target, "daily_target_nots")),
            "weekly_target_nots": round(_number(target, "weekly_target_nots")),
            "total_equity": equity,
            "monthly_target_nots": monthly_target,
            "today_nots": _number(main, "today_nots"),
            "today_margin_added": _number(main, "today_margin_added"),
            "today_withdrawals": _number(main, "today_withdrawals"),
        }
        return {"stats": stats, "equity_target": target, "retention_metrics": retention}


dashboard = DashboardService()
