import uuid
from datetime import UTC, date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base


def _score_check(column: str) -> CheckConstraint:
    return CheckConstraint(f"{column} >= 1 AND {column} <= 5", name=f"ck_agent_evaluations_{column}")


class AgentEvaluation(Base):
    __tablename__ = "agent_evaluations"
    __table_args__ = (
        UniqueConstraint("agent_id", "week_start_date", name="uq_agent_evaluations_agent_week"),
        Index("ix_agent_evaluations_week", "week_start_date"),
        Index("ix_agent_evaluations_score", "total_score"),
        _score_check("compliance_score"),
        _score_check("tone_clarity_score"),
        _score_check("relevance_score"),
        _score_check("client_satisfaction_score"),
        _score_check("portfolio_revenue_score"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    agent_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("agents.id", ondelete="CASCADE"), nullable=False
    )
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)

    compliance_score: Mapped[int] = mapped_column(Integer, nullable=False)
    tone_clarity_score: Mapped[int] = mapped_column(Integer, nullable=False)
    relevance_score: Mapped[int] = mapped_column(Integer, nullable=False)
    client_satisfaction_score: Mapped[int] = mapped_column(Integer, nullable=False)
    portfolio_revenue_score: Mapped[int] = mapped_column(Integer, nullable=False)
    total_score: Mapped[int] = mapped_column(Integer, nullable=False)

    compliance_remarks: Mapped[str | None] = mapped_column(Text)
    tone_remarks: Mapped[str | None] = mapped_column(Text)
    relevance_remarks: Mapped[str | None] = mapped_column(Text)
    satisfaction_remarks: Mapped[str | None] = mapped_column(Text)
    portfolio_remarks: Mapped[str | None] = mapped_column(Text)
    overall_remarks: Mapped[str | None] = mapped_column(Text)
    evaluated_by: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    agent = relationship("Agent", back_populates="evaluations")
