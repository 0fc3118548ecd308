from __future__ import annotations

import builtins
from datetime import date
from typing import Any

from sqlalchemy.orm import Session, joinedload

from app.models.client import Client
from app.models.performance import DailyPerformance, MonthlyPerformance
from app.schemas.performance import MonthlyPerformanceCreate, MonthlyPerformanceUpdate
from app.services import data_service
from app.services.common import (
    apply_pagination,
    coerce_uuid,
    commit_or_raise,
    get_or_404,
    require_admin,
    validate_month_year,
)
from app.services.response import ListResponseMixin

PERIOD_TAKEN = "Monthly performance already recorded for this client and period"


class MonthlyPerformanceService(ListResponseMixin):
    @staticmethod
    def list(
        db: Session,
        month: int | None = None,
        year: int | None = None,
        client_id: str | None = None,
        limit: int = 200,
        offset: int = 0,
    ) -> list[MonthlyPerformance]:
        query = db.query(MonthlyPerformance).options(
            joinedload(MonthlyPerformance.client).joinedload(Client.agent)
        )
        # A lone month or year is ignored
        if month and year:
            query = query.filter(MonthlyPerformance.month == month, MonthlyPerformance.year == year)
        if client_id:
            query = query.filter(MonthlyPerformance.client_id == coerce_uuid(client_id))
        query = query.order_by(MonthlyPerformance.year.desc(), MonthlyPerformance.month.desc())
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def get(db: Session, record_id: str) -> MonthlyPerformance:
        return get_or_404(db, MonthlyPerformance, record_id, detail="Monthly performance not found")

    @staticmethod
    def create(db: Session, payload: MonthlyPerformanceCreate, is_admin: bool) -> MonthlyPerformance:
        require_admin(is_admin)
        get_or_404(db, Client, payload.client_id)
        record = MonthlyPerformance(**payload.model_dump())
        db.add(record)
        commit_or_raise(db, "Failed to add monthly performance", conflict_detail=PERIOD_TAKEN)
        db.refresh(record)
        return record

    @staticmethod
    def update(
        db: Session, record_id: str, payload: MonthlyPerformanceUpdate, is_admin: bool
    ) -> MonthlyPerformance:
        require_admin(is_admin)
        record = get_or_404(db, MonthlyPerformance, record_id, detail="Monthly performance not found")
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(record, field, value)
        commit_or_raise(db, "Failed to update monthly performance")
        db.refresh(record)
        return record

    @staticmethod
    def delete(db: Session, record_id: str, is_admin: bool) -> None:
        require_admin(is_admin)
        record = get_or_404(db, MonthlyPerformance, record_id, detail="Monthly performance not found")
        db.delete(record)
        commit_or_raise(db, "Failed to delete monthly performance")

    @staticmethod
    def team_stats(db: Session, month: int, year: int) -> dict[str, Any] | None:
        validate_month_year(month, year)
        with data_service.fallback_message("Failed to get monthly team stats"):
            rows = data_service.rpc_rows(
                db, "get_monthly_team_stats", {"target_month": month, "target_year": year}
            )
        return rows[0] if rows else None


class DailyPerformanceService:
    @staticmethod
    def list(
        db: Session,
        client_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 200,
        offset: int = 0,
    ) -> builtins.list[DailyPerformance]:
        query = db.query(DailyPerformance)
        if client_id:
            query = query.filter(DailyPerformance.client_id == coerce_uuid(client_id))
        if start_date:
            query = query.filter(DailyPerformance.entry_date >= start_date)
        if end_date:
            query = query.filter(DailyPerformance.entry_date <= end_date)
        query = query.order_by(DailyPerformance.entry_date.desc(), DailyPerformance.created_at.desc())
        return apply_pagination(query, limit, offset).all()


monthly_performance = MonthlyPerformanceService()
daily_performance = DailyPerformanceService()
