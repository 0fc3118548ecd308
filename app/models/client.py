import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base


class Client(Base):
    __tablename__ = "clients"
    __table_args__ = (Index("ix_clients_agent_id", "agent_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    margin_in: Mapped[float] = mapped_column(Numeric(16, 2), nullable=False, default=0)
    overall_margin: Mapped[float] = mapped_column(Numeric(16, 2), nullable=False, default=0)
    invested_amount: Mapped[float] = mapped_column(Numeric(16, 2), nullable=False, default=0)
    monthly_revenue: Mapped[float] = mapped_column(Numeric(16, 2), nullable=False, default=0)
    nots_generated: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    agent_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("agents.id", ondelete="SET NULL")
    )
    is_new_client: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    agent = relationship("Agent", back_populates="clients")
    daily_entries = relationship("DailyPerformance", back_populates="client", cascade="all, delete-orphan")
    monthly_entries = relationship("MonthlyPerformance", back_populates="client", cascade="all, delete-orphan")
