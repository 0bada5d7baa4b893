import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from project_budget.config import settings


class BudgetLineCreate(BaseModel):
    """Incoming budget line. Required fields are checked by the ledger, not here."""

    amount: Decimal | str | None = None
    comment: str = Field(default="", max_length=2000)
    date: str | None = Field(default=None, description="DD/MM/YYYY or YYYY-MM-DD; defaults to today")


class HourlyRateCreate(BaseModel):
    user_id: uuid.UUID
    rate: Decimal = Field(..., ge=0)
    currency: str = Field(default_factory=lambda: settings.base_currency, min_length=3, max_length=3)
    effective_from: datetime


class HourlyRateRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    project_id: uuid.UUID
    rate: Decimal
    currency: str
    effective_from: datetime

    model_config = {"from_attributes": True}


class CurrencyRateSet(BaseModel):
    rate: Decimal = Field(..., gt=0)


class CurrencyRateRead(BaseModel):
    currency: str
    rate: Decimal

    model_config = {"from_attributes": True}
