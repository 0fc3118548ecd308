import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base


class Product(Base):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(160), nullable=False, unique=True)
    commission_usd: Mapped[float] = mapped_column(Numeric(12, 4), nullable=False)
    tick_size: Mapped[float] = mapped_column(Numeric(12, 6), nullable=False)
    tick_value: Mapped[float] = mapped_column(Numeric(12, 4), nullable=False)
    price_quote: Mapped[float] = mapped_column(Numeric(14, 4), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
