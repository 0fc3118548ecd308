import uuid
from datetime import UTC, date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base


class MonthlyPerformance(Base):
    __tablename__ = "monthly_performance"
    __table_args__ = (
        UniqueConstraint("client_id", "month", "year", name="uq_monthly_performance_client_period"),
        CheckConstraint("month >= 1 AND month <= 12", name="ck_monthly_performance_month"),
        Index("ix_monthly_performance_period", "year", "month"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    margin_in: Mapped[float] = mapped_column(Numeric(16, 2), nullable=False, default=0)
    overall_margin: Mapped[float] = mapped_column(Numeric(16, 2), nullable=False, default=0)
    revenue_generated: Mapped[float] = mapped_column(Numeric(16, 2), nullable=False, default=0)
    nots_achieved: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    client = relationship("Client", back_populates="monthly_entries")


class DailyPerformance(Base):
    __tablename__ = "daily_performance"
    __table_args__ = (Index("ix_daily_performance_client_date", "client_id", "entry_date"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    entry_date: Mapped[date] = mapped_column(Date, nullable=False, default=lambda: datetime.now(UTC).date())
    margin_in: Mapped[float] = mapped_column(Numeric(16, 2), nullable=False, default=0)
    overall_margin: Mapped[float] = mapped_column(Numeric(16, 2), nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    client = relationship("Client", back_populates="daily_entries")


class MonthlyBaseEquity(Base):
    """Reference equity per month, written by ``set_monthly_base_equity``."""

    __tablename__ = "monthly_base_equity"
    __table_args__ = (
        UniqueConstraint("month", "year", name="uq_monthly_base_equity_period"),
        CheckConstraint("month >= 1 AND month <= 12", name="ck_monthly_base_equity_month"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    total_base_equity: Mapped[float] = mapped_column(Numeric(18, 2), nullable=False, default=0)
    set_by_admin: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))


class MonthlyReset(Base):
    """Audit trail of ``reset_monthly_performance`` runs."""

    __tablename__ = "monthly_resets"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    reset_month: Mapped[int] = mapped_column(Integer, nullable=False)
    reset_year: Mapped[int] = mapped_column(Integer, nullable=False)
    previous_month: Mapped[int] = mapped_column(Integer, nullable=False)
    previous_year: Mapped[int] = mapped_column(Integer, nullable=False)
    clients_reset: Mapped[int] = mapped_column(Integer, default=0)
    total_revenue_reset: Mapped[float] = mapped_column(Numeric(18, 2), default=0)
    total_nots_reset: Mapped[float] = mapped_column(Numeric(18, 2), default=0)
    reset_by_admin: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
