from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ClientAgentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    email: str


class ClientBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    margin_in: float = Field(default=0, ge=0)
    overall_margin: float = Field(default=0, ge=0)
    invested_amount: float = Field(default=0, ge=0)
    monthly_revenue: float = Field(default=0, ge=0)


class ClientCreate(ClientBase):
    agent_id: UUID | None = None


class ClientUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    margin_in: float | None = Field(default=None, ge=0)
    overall_margin: float | None = Field(default=None, ge=0)
    invested_amount: float | None = Field(default=None, ge=0)
    monthly_revenue: float | None = Field(default=None, ge=0)


class ClientRead(ClientBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    nots_generated: int
    agent_id: UUID | None = None
    is_new_client: bool | None = None
    created_at: datetime
    updated_at: datetime
    agent: ClientAgentRead | None = None


class DailyMarginCreate(BaseModel):
    margin_in: float = Field(ge=0)
    overall_margin: float = Field(ge=0)
    entry_date: date | None = None
