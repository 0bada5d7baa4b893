from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from project_budget.models.base import Base, TimestampMixin


class Currency(TimestampMixin, Base):
    """Conversion rate from a currency to the configured base currency."""

    __tablename__ = "currencies"

    currency: Mapped[str] = mapped_column(String(3), primary_key=True)
    rate: Mapped[Decimal] = mapped_column(Numeric(precision=14, scale=6), nullable=False)
