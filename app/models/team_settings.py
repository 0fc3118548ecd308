import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, Numeric
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base


class TeamSettings(Base):
    """Team-wide thresholds; the table holds a single row."""

    __tablename__ = "team_settings"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    commission_threshold_pkr: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False, default=6000)
    nots_target_per_client: Mapped[int] = mapped_column(Integer, nullable=False, default=50)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
