from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DashboardStats(BaseModel):
    total_clients: int = 0
    total_margin_in: float = 0
    total_overall_margin: float = 0
    total_monthly_revenue: float = 0
    total_nots: float = 0
    target_nots: int = 0
    progress_percentage: float = 0
    daily_target_nots: int = 0
    weekly_target_nots: int = 0
    total_equity: float = 0
    monthly_target_nots: float = 0
    today_nots: float = 0
    today_margin_added: float = 0
    today_withdrawals: float = 0


class EquityTarget(BaseModel):
    model_config = ConfigDict(extra="allow")
    total_equity: float = 0
    monthly_target_nots: float = 0
    daily_target_nots: float = 0
    weekly_target_nots: float = 0


class RetentionMetrics(BaseModel):
    model_config = ConfigDict(extra="allow")
    total_clients: int = 0
    active_clients: int = 0
    retention_rate: float = 0
    avg_trades_per_client: float = 0
    total_commission: float = 0
    avg_commission_per_client: float = 0


class DashboardOverview(BaseModel):
    stats: DashboardStats
    equity_target: EquityTarget | None = None
    retention_metrics: RetentionMetrics | None = None


class BaseEquityRequest(BaseModel):
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2020)
    base_equity: float = Field(ge=0)


class MonthlyResetRequest(BaseModel):
    new_month: int = Field(ge=1, le=12)
    new_year: int = Field(ge=2020)


class MonthlyStats(BaseModel):
    model_config = ConfigDict(extra="allow")
    month_year: str | None = None
    total_clients: int = 0
    base_equity: float = 0
    current_equity: float = 0
    monthly_target_nots: float = 0
    daily_target_nots: float = 0
    weekly_target_nots: float = 0
    achieved_nots: float = 0
    progress_percentage: float = 0
    total_revenue: float = 0
    working_days: int | None = None


class CurrentMonthStats(BaseModel):
    model_config = ConfigDict(extra="allow")
    total_clients: int = 0
    current_equity: float = 0
    total_revenue: float = 0
    achieved_nots: float = 0
    base_equity: float = 0
    monthly_target_nots: float = 0
    progress_percentage: float = 0
    today_nots: float = 0
    today_margin_added: float = 0
    today_withdrawals: float = 0
