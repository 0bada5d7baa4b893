import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from project_budget.models.base import Base, TimestampMixin, generate_uuid


class HourlyRate(TimestampMixin, Base):
    """A user's hourly price on a project, effective from a point in time until superseded."""

    __tablename__ = "hourly_rates"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("projects.id"), nullable=False, index=True
    )
    rate: Mapped[Decimal] = mapped_column(Numeric(precision=14, scale=2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    date_effective: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
