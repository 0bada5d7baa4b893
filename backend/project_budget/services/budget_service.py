"""Budget ledger: project budget credits and cost reconciliation.

- Credits are entered by hand, never updated (corrections are delete + recreate)
- Breakdown: tracked time joined with task and user, priced at the rate in force
  at the task start
- Daily series: positive credits against breakdown costs, with a running balance
- Validation failures are returned as (valid, errors), never raised
"""

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Awaitable, Callable

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from project_budget.core.clock import Clock, system_clock, utc_day
from project_budget.models.budget import BudgetLine
from project_budget.models.project import Project
from project_budget.models.task import Subtask, Task
from project_budget.models.user import User
from project_budget.services import currency_service, rate_service
from project_budget.services.cost_service import AnnotatedTimeEntry, TimeEntry, annotate
from project_budget.services.currency_service import CurrencyConverter
from project_budget.services.daily_series import DailyPoint, build_daily_series
from project_budget.services.rate_service import RateRecord

logger = logging.getLogger("project_budget.ledger")

FIELD_REQUIRED = "Field required"
REQUIRED_FIELDS = ("project_id", "amount")

_DMY_PATTERN = re.compile(r"\d{2}/\d{2}/\d{4}")

# budget_lines.amount is Numeric(14, 2)
MAX_AMOUNT = Decimal("1e12")

RateDirectory = Callable[[AsyncSession, uuid.UUID], Awaitable[list[RateRecord]]]
ConverterLoader = Callable[[AsyncSession, str], Awaitable[CurrencyConverter]]


@dataclass(frozen=True)
class BreakdownFilters:
    """Optional restrictions on the breakdown query."""

    user_id: uuid.UUID | None = None


@dataclass
class CreditResult:
    valid: bool
    errors: dict[str, list[str]] = field(default_factory=dict)
    budget_id: uuid.UUID | None = None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_amount(value: Any) -> Decimal:
    """Decimal amount from form or API input. Raises ValueError if not a finite number."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def parse_budget_date(value: Any, *, today: date) -> date:
    """Budget line date from DD/MM/YYYY, YYYY-MM-DD or a date. Blank means today."""
    if _is_blank(value):
        return today
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if _DMY_PATTERN.fullmatch(text):
        return datetime.strptime(text, "%d/%m/%Y").date()
    return date.fromisoformat(text)


def validate_creation(
    values: dict[str, Any], *, today: date
) -> tuple[bool, dict[str, list[str]]]:
    """Check a budget line before creation. Returns (valid, {field: [messages]})."""
    errors: dict[str, list[str]] = {}
    for name in REQUIRED_FIELDS:
        if _is_blank(values.get(name)):
            errors.setdefault(name, []).append(FIELD_REQUIRED)

    if "amount" not in errors:
        try:
            amount = parse_amount(values["amount"])
        except ValueError:
            amount = None
        if amount is None or abs(amount) >= MAX_AMOUNT:
            errors.setdefault("amount", []).append("Invalid amount")

    try:
        parse_budget_date(values.get("date"), today=today)
    except ValueError:
        errors.setdefault("date", []).append("Invalid date")

    return not errors, errors


class BudgetLedger:
    """Project-scoped budget operations over one session.

    Collaborators are passed in: the rate directory, the currency converter
    loader and the clock. Defaults read from the database and the system clock.
    """

    def __init__(
        self,
        db: AsyncSession,
        *,
        clock: Clock = system_clock,
        base_currency: str = "USD",
        rate_directory: RateDirectory = rate_service.get_all_by_project,
        converter_loader: ConverterLoader = currency_service.load_converter,
    ) -> None:
        self.db = db
        self.clock = clock
        self.base_currency = base_currency
        self._rate_directory = rate_directory
        self._converter_loader = converter_loader

    async def get_project(self, project_id: uuid.UUID) -> Project | None:
        return await self.db.get(Project, project_id)

    # --- Credits ---

    async def list_credits(self, project_id: uuid.UUID) -> list[BudgetLine]:
        """All budget lines of a project, newest date first."""
        result = await self.db.execute(
            select(BudgetLine)
            .where(BudgetLine.project_id == project_id)
            .order_by(BudgetLine.date.desc(), BudgetLine.created_at.desc())
        )
        return list(result.scalars().all())

    async def total_credits(self, project_id: uuid.UUID) -> Decimal:
        result = await self.db.execute(
            select(func.sum(BudgetLine.amount)).where(BudgetLine.project_id == project_id)
        )
        total = result.scalar_one_or_none()
        if total is None:
            return Decimal("0")
        return Decimal(str(total))

    async def create_credit(
        self,
        project_id: uuid.UUID | None,
        amount: Any,
        comment: str | None = "",
        date: Any = None,
    ) -> CreditResult:
        """Validate and store a budget line. Nothing is written when invalid."""
        today = utc_day(self.clock())
        valid, errors = validate_creation(
            {"project_id": project_id, "amount": amount, "comment": comment, "date": date},
            today=today,
        )
        if not valid:
            logger.info("budget line rejected project=%s fields=%s", project_id, sorted(errors))
            return CreditResult(valid=False, errors=errors)

        line = BudgetLine(
            project_id=project_id,
            amount=parse_amount(amount),
            comment=comment or "",
            date=parse_budget_date(date, today=today),
        )
        self.db.add(line)
        await self.db.flush()

        logger.info(
            "budget line created id=%s project=%s amount=%s date=%s",
            line.id,
            project_id,
            line.amount,
            line.date.isoformat(),
        )
        return CreditResult(valid=True, budget_id=line.id)

    async def remove_credit(
        self,
        budget_id: uuid.UUID,
        *,
        project_id: uuid.UUID | None = None,
    ) -> bool:
        stmt = delete(BudgetLine).where(BudgetLine.id == budget_id)
        if project_id is not None:
            stmt = stmt.where(BudgetLine.project_id == project_id)
        result = await self.db.execute(stmt)
        await self.db.flush()

        removed = result.rowcount > 0
        if removed:
            logger.info("budget line removed id=%s", budget_id)
        return removed

    # --- Breakdown ---

    def _breakdown_query(self, columns: tuple, project_id: uuid.UUID, filters: BreakdownFilters):
        stmt = (
            select(*columns)
            .select_from(Subtask)
            .join(Task, Task.id == Subtask.task_id)
            .join(User, User.id == Subtask.user_id)
            .where(
                Subtask.time_spent > 0,
                Task.project_id == project_id,
            )
        )
        if filters.user_id is not None:
            stmt = stmt.where(Subtask.user_id == filters.user_id)
        return stmt

    async def count_breakdown(
        self,
        project_id: uuid.UUID,
        filters: BreakdownFilters | None = None,
    ) -> int:
        stmt = self._breakdown_query(
            (func.count(Subtask.id),), project_id, filters or BreakdownFilters()
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def _fetch_entries(
        self,
        project_id: uuid.UUID,
        filters: BreakdownFilters,
        *,
        limit: int | None,
        offset: int,
    ) -> list[TimeEntry]:
        # Tasks without a start count as "now", so they sort first.
        stmt = self._breakdown_query((Subtask, Task, User), project_id, filters).order_by(
            Task.date_creation.is_(None).desc(),
            Task.date_creation.desc(),
            Subtask.id.asc(),
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)

        result = await self.db.execute(stmt)
        return [
            TimeEntry(
                id=subtask.id,
                user_id=subtask.user_id,
                task_id=task.id,
                project_id=task.project_id,
                time_spent=subtask.time_spent,
                start=task.date_creation,
                subtask_title=subtask.title,
                task_title=task.title,
                username=user.username,
                name=user.name,
            )
            for subtask, task, user in result.all()
        ]

    async def _annotated(
        self,
        project_id: uuid.UUID,
        filters: BreakdownFilters,
        *,
        now: datetime,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[AnnotatedTimeEntry]:
        entries = await self._fetch_entries(project_id, filters, limit=limit, offset=offset)
        if not entries:
            return []

        rates = await self._rate_directory(self.db, project_id)
        converter = await self._converter_loader(self.db, self.base_currency)
        return annotate(entries, rates, now=now, converter=converter)

    async def breakdown(
        self,
        project_id: uuid.UUID,
        filters: BreakdownFilters | None = None,
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[AnnotatedTimeEntry]:
        """Tracked time with cost, most recent task start first."""
        return await self._annotated(
            project_id,
            filters or BreakdownFilters(),
            now=self.clock(),
            limit=limit,
            offset=offset,
        )

    # --- Daily series ---

    async def daily_series(self, project_id: uuid.UUID) -> list[DailyPoint]:
        now = self.clock()
        result = await self.db.execute(
            select(BudgetLine)
            .where(BudgetLine.project_id == project_id, BudgetLine.amount > 0)
            .order_by(BudgetLine.date.asc())
        )
        credits = list(result.scalars().all())
        entries = await self._annotated(project_id, BreakdownFilters(), now=now)
        return build_daily_series(credits, entries, now=now)
