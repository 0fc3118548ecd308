from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AgentBase(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: str | None = Field(default=None, max_length=40)
    commission_rate: float = Field(default=0, ge=0, le=1)
    is_active: bool = True


class AgentCreate(AgentBase):
    pass


class AgentUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    email: str | None = Field(default=None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: str | None = Field(default=None, max_length=40)
    commission_rate: float | None = Field(default=None, ge=0, le=1)
    is_active: bool | None = None


class AgentRead(AgentBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    created_at: datetime
    updated_at: datetime
    # Filled from the agent_performance_summary view
    client_count: int | None = None
    active_client_count: int | None = None
    total_client_margin: float | None = None
    total_client_revenue: float | None = None
    total_client_nots: float | None = None
    estimated_commission: float | None = None


class ClientAgentLink(BaseModel):
    client_id: UUID
