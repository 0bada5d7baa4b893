"""Cost annotation: attach a monetary cost to tracked time.

cost = hourly price at the task start x hours spent. A task without a start
is priced as of "now". Inputs are never mutated; annotation returns new
values.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from project_budget.core.clock import ensure_tz
from project_budget.services.rate_service import PriceConverter, RateRecord, resolve_rate


@dataclass(frozen=True)
class TimeEntry:
    id: uuid.UUID
    user_id: uuid.UUID | None
    task_id: uuid.UUID
    project_id: uuid.UUID
    time_spent: Decimal
    start: datetime | None
    subtask_title: str = ""
    task_title: str = ""
    username: str | None = None
    name: str | None = None

    def effective_start(self, now: datetime) -> datetime:
        return ensure_tz(self.start) if self.start is not None else ensure_tz(now)


@dataclass(frozen=True)
class AnnotatedTimeEntry:
    entry: TimeEntry
    start: datetime
    hourly_price: Decimal
    cost: Decimal


def annotate(
    entries: list[TimeEntry],
    rates: list[RateRecord],
    *,
    now: datetime,
    converter: PriceConverter | None = None,
) -> list[AnnotatedTimeEntry]:
    """Price each entry with the rate in force at its start.

    Callers skip the rate lookup entirely when there are no entries; an empty
    list simply yields an empty list here.
    """
    annotated = []
    for entry in entries:
        start = entry.effective_start(now)
        price = resolve_rate(entry.user_id, start, rates, converter)
        annotated.append(
            AnnotatedTimeEntry(
                entry=entry,
                start=start,
                hourly_price=price,
                cost=price * entry.time_spent,
            )
        )
    return annotated
