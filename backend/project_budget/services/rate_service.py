"""Hourly rate directory and rate resolution.

- A user may have several rates on a project; each applies from its
  effective date until a later one supersedes it.
- Resolution picks the rate with the latest effective date that is still
  <= the point in time being priced. No qualifying rate means a price of 0:
  unrated work is free, not an error.
- Ties on the effective date go to the record listed last. The directory
  lists rates by (effective date, created_at, id), so the most recently
  entered rate wins.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from project_budget.core.clock import ensure_tz
from project_budget.models.hourly_rate import HourlyRate


class PriceConverter(Protocol):
    def get_price(self, currency: str, price: Decimal) -> Decimal: ...


@dataclass(frozen=True)
class RateRecord:
    user_id: uuid.UUID
    project_id: uuid.UUID
    currency: str
    rate: Decimal
    effective_from: datetime
    id: uuid.UUID | None = None


def resolve_rate(
    user_id: uuid.UUID | None,
    at: datetime,
    rates: list[RateRecord],
    converter: PriceConverter | None = None,
) -> Decimal:
    """Hourly price for a user at a point in time, in the base currency."""
    at = ensure_tz(at)
    best: RateRecord | None = None
    for record in rates:
        if record.user_id != user_id:
            continue
        effective = ensure_tz(record.effective_from)
        if effective > at:
            continue
        if best is None or effective >= ensure_tz(best.effective_from):
            best = record

    if best is None:
        return Decimal("0")
    if converter is None:
        return best.rate
    return converter.get_price(best.currency, best.rate)


def to_record(rate: HourlyRate) -> RateRecord:
    return RateRecord(
        id=rate.id,
        user_id=rate.user_id,
        project_id=rate.project_id,
        currency=rate.currency,
        rate=rate.rate,
        effective_from=ensure_tz(rate.date_effective),
    )


async def get_all_by_project(db: AsyncSession, project_id: uuid.UUID) -> list[RateRecord]:
    """Every rate on a project, oldest effective date first."""
    result = await db.execute(
        select(HourlyRate)
        .where(HourlyRate.project_id == project_id)
        .order_by(
            HourlyRate.date_effective.asc(),
            HourlyRate.created_at.asc(),
            HourlyRate.id.asc(),
        )
    )
    return [to_record(r) for r in result.scalars().all()]


async def create_rate(
    db: AsyncSession,
    *,
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    rate: Decimal,
    currency: str,
    effective_from: datetime,
) -> HourlyRate:
    record = HourlyRate(
        project_id=project_id,
        user_id=user_id,
        rate=rate,
        currency=currency.upper(),
        date_effective=ensure_tz(effective_from),
    )
    db.add(record)
    await db.flush()
    return record


async def remove_rate(db: AsyncSession, *, project_id: uuid.UUID, rate_id: uuid.UUID) -> bool:
    result = await db.execute(
        delete(HourlyRate).where(
            HourlyRate.id == rate_id,
            HourlyRate.project_id == project_id,
        )
    )
    await db.flush()
    return result.rowcount > 0
