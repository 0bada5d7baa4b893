import uuid
from datetime import date as date_type
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from project_budget.models.base import Base, TimestampMixin, generate_uuid


class BudgetLine(TimestampMixin, Base):
    """Manually entered budget credit. Never updated: corrections are delete + recreate."""

    __tablename__ = "budget_lines"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    project_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("projects.id"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False
    )  # Signed; positive = credit
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
