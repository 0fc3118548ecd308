from __future__ import annotations

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

AlertLevel = Literal["critical", "warning", "good", "excellent", "none"]


class AgentEvaluationCreate(BaseModel):
    agent_id: UUID
    week_start_date: date
    compliance_score: int = Field(ge=1, le=5)
    tone_clarity_score: int = Field(ge=1, le=5)
    relevance_score: int = Field(ge=1, le=5)
    client_satisfaction_score: int = Field(ge=1, le=5)
    portfolio_revenue_score: int = Field(ge=1, le=5)
    compliance_remarks: str | None = None
    tone_remarks: str | None = None
    relevance_remarks: str | None = None
    satisfaction_remarks: str | None = None
    portfolio_remarks: str | None = None
    overall_remarks: str | None = None


class AgentEvaluationUpdate(BaseModel):
    compliance_score: int | None = Field(default=None, ge=1, le=5)
    tone_clarity_score: int | None = Field(default=None, ge=1, le=5)
    relevance_score: int | None = Field(default=None, ge=1, le=5)
    client_satisfaction_score: int | None = Field(default=None, ge=1, le=5)
    portfolio_revenue_score: int | None = Field(default=None, ge=1, le=5)
    compliance_remarks: str | None = None
    tone_remarks: str | None = None
    relevance_remarks: str | None = None
    satisfaction_remarks: str | None = None
    portfolio_remarks: str | None = None
    overall_remarks: str | None = None


class AgentEvaluationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    agent_id: UUID
    agent_name: str | None = None
    agent_email: str | None = None
    week_start_date: date
    compliance_score: int
    tone_clarity_score: int
    relevance_score: int
    client_satisfaction_score: int
    portfolio_revenue_score: int
    total_score: int
    performance_level: str
    alert_message: str
    compliance_remarks: str | None = None
    tone_remarks: str | None = None
    relevance_remarks: str | None = None
    satisfaction_remarks: str | None = None
    portfolio_remarks: str | None = None
    overall_remarks: str | None = None
    evaluated_by: str
    created_at: datetime
    updated_at: datetime | None = None


class EvaluationAlert(BaseModel):
    agent_id: UUID
    agent_name: str
    agent_email: str
    total_score: int | None = None
    week_start_date: date | None = None
    alert_message: str
    alert_level: AlertLevel


class EvaluationPointRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    label: str
    description: str
    category: str


class CoreCriterionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    label: str
    description: str
    score_field: str
    remarks_field: str


class EvaluationRubric(BaseModel):
    categories: list[str]
    points: list[EvaluationPointRead]
    core_criteria: list[CoreCriterionRead]
