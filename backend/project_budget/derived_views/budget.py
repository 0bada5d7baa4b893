"""Derived view builders for project budgets.

Amounts are serialized as strings so no precision is lost on the way to the UI.
Daily points use the chart keys: date, in, out (negative), left.
"""

import math
import uuid

from project_budget.models.budget import BudgetLine
from project_budget.models.project import Project
from project_budget.services.budget_service import BreakdownFilters, BudgetLedger
from project_budget.services.cost_service import AnnotatedTimeEntry
from project_budget.services.daily_series import DailyPoint


def budget_line_view(line: BudgetLine) -> dict:
    return {
        "id": str(line.id),
        "project_id": str(line.project_id),
        "amount": str(line.amount),
        "comment": line.comment,
        "date": line.date.isoformat(),
    }


def breakdown_item_view(item: AnnotatedTimeEntry) -> dict:
    entry = item.entry
    return {
        "id": str(entry.id),
        "task_id": str(entry.task_id),
        "task_title": entry.task_title,
        "subtask_title": entry.subtask_title,
        "user_id": str(entry.user_id) if entry.user_id else None,
        "username": entry.username,
        "name": entry.name,
        "start": item.start.isoformat(),
        "time_spent": str(entry.time_spent),
        "hourly_price": str(item.hourly_price),
        "cost": str(item.cost),
    }


def daily_point_view(point: DailyPoint) -> dict:
    return {
        "date": point.date.isoformat(),
        "in": str(point.money_in),
        "out": str(point.money_out),
        "left": str(point.left),
    }


async def budget_lines_view(ledger: BudgetLedger, project_id: uuid.UUID) -> list[dict]:
    return [budget_line_view(line) for line in await ledger.list_credits(project_id)]


async def budget_overview_view(ledger: BudgetLedger, project: Project) -> dict:
    """Chart data for a project: total credited and the daily series."""
    total = await ledger.total_credits(project.id)
    series = await ledger.daily_series(project.id)
    return {
        "project": {"id": str(project.id), "name": project.name},
        "total": str(total),
        "daily_budget": [daily_point_view(p) for p in series],
    }


async def breakdown_page_view(
    ledger: BudgetLedger,
    project_id: uuid.UUID,
    *,
    filters: BreakdownFilters,
    page: int,
    per_page: int,
) -> dict:
    """One page of the cost breakdown, most recent task start first."""
    total = await ledger.count_breakdown(project_id, filters)
    items = await ledger.breakdown(
        project_id, filters, limit=per_page, offset=(page - 1) * per_page
    )
    return {
        "items": [breakdown_item_view(i) for i in items],
        "page": page,
        "per_page": per_page,
        "total": total,
        "pages": math.ceil(total / per_page) if total else 0,
    }
