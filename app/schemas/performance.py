from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.client import ClientRead


class MonthlyPerformanceBase(BaseModel):
    client_id: UUID
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2020)
    margin_in: float = Field(default=0, ge=0)
    overall_margin: float = Field(default=0, ge=0)
    revenue_generated: float = Field(default=0, ge=0)
    nots_achieved: int = Field(default=0, ge=0)


class MonthlyPerformanceCreate(MonthlyPerformanceBase):
    pass


class MonthlyPerformanceUpdate(BaseModel):
    margin_in: float | None = Field(default=None, ge=0)
    overall_margin: float | None = Field(default=None, ge=0)
    revenue_generated: float | None = Field(default=None, ge=0)
    nots_achieved: int | None = Field(default=None, ge=0)


class MonthlyPerformanceRead(MonthlyPerformanceBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    created_at: datetime
    client: ClientRead | None = None


class DailyPerformanceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    client_id: UUID
    entry_date: date
    margin_in: float
    overall_margin: float
    created_at: datetime


class MonthlyTeamStats(BaseModel):
    total_clients: int = 0
    total_margin_in: float = 0
    total_overall_margin: float = 0
    total_revenue: float = 0
    total_nots: float = 0
    target_nots: float | None = None
    progress_percentage: float = 0
