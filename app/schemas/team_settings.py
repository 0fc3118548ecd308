from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TeamSettingsUpdate(BaseModel):
    commission_threshold_pkr: float | None = Field(default=None, gt=0)
    nots_target_per_client: int | None = Field(default=None, gt=0)


class TeamSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    commission_threshold_pkr: float
    nots_target_per_client: int
    created_at: datetime
    updated_at: datetime
