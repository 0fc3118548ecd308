from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    commission_usd: float = Field(ge=0)
    tick_size: float = Field(gt=0)
    tick_value: float = Field(gt=0)
    price_quote: float = Field(gt=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    commission_usd: float | None = Field(default=None, ge=0)
    tick_size: float | None = Field(default=None, gt=0)
    tick_value: float | None = Field(default=None, gt=0)
    price_quote: float | None = Field(default=None, gt=0)


class ProductRead(ProductBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    created_at: datetime
