"""Daily budget series: credits in, costs out, running balance.

1. Credits with a positive amount are summed per calendar day ("in").
2. Annotated costs are summed per UTC calendar day of their start ("out").
3. The scan starts at the earliest day in either bucket (today if both are
   empty) and ends tomorrow, inclusive.
4. A point is emitted only on days with activity. Silent days carry the
   balance forward untouched.

Activity dated after tomorrow falls outside the scan and is not emitted.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Protocol

from project_budget.core.clock import utc_day
from project_budget.services.cost_service import AnnotatedTimeEntry

ZERO = Decimal("0")


class Credit(Protocol):
    amount: Decimal
    date: date


@dataclass(frozen=True)
class DailyPoint:
    date: date
    money_in: Decimal
    money_out: Decimal  # Reported negative
    left: Decimal


def _bucket_credits(credits: Iterable[Credit]) -> dict[date, Decimal]:
    buckets: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for credit in credits:
        if credit.amount > 0:
            buckets[credit.date] += credit.amount
    return buckets


def _bucket_costs(entries: Iterable[AnnotatedTimeEntry]) -> dict[date, Decimal]:
    buckets: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for item in entries:
        buckets[utc_day(item.start)] += item.cost
    return buckets


def build_daily_series(
    credits: Iterable[Credit],
    entries: Iterable[AnnotatedTimeEntry],
    *,
    now: datetime,
) -> list[DailyPoint]:
    money_in = _bucket_credits(credits)
    money_out = _bucket_costs(entries)

    today = utc_day(now)
    start = min([today, *money_in.keys(), *money_out.keys()])
    end = today + timedelta(days=1)

    series: list[DailyPoint] = []
    left = ZERO
    day = start
    while day <= end:
        day_in = money_in.get(day, ZERO)
        day_out = money_out.get(day, ZERO)
        if day_in > 0 or day_out > 0:
            left += day_in
            left -= day_out
            series.append(
                DailyPoint(date=day, money_in=day_in, money_out=-day_out if day_out else ZERO, left=left)
            )
        day += timedelta(days=1)

    return series
