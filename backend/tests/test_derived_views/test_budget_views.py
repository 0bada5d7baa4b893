from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from project_budget.derived_views.budget import (
    breakdown_page_view,
    budget_lines_view,
    daily_point_view,
)
from project_budget.models.project import Project
from project_budget.services.budget_service import BreakdownFilters, BudgetLedger
from project_budget.services.daily_series import DailyPoint


def test_daily_point_uses_chart_keys():
    point = DailyPoint(
        date=date(2024, 1, 2),
        money_in=Decimal("0"),
        money_out=Decimal("-100.00"),
        left=Decimal("-100.00"),
    )
    assert daily_point_view(point) == {
        "date": "2024-01-02",
        "in": "0",
        "out": "-100.00",
        "left": "-100.00",
    }


@pytest.mark.asyncio
async def test_breakdown_page_view_empty(ledger: BudgetLedger, db_session: AsyncSession):
    project = Project(name="Empty")
    db_session.add(project)
    await db_session.commit()

    view = await breakdown_page_view(
        ledger, project.id, filters=BreakdownFilters(), page=1, per_page=30
    )

    assert view == {"items": [], "page": 1, "per_page": 30, "total": 0, "pages": 0}


@pytest.mark.asyncio
async def test_budget_lines_view_serializes_amounts(ledger: BudgetLedger, db_session: AsyncSession):
    project = Project(name="Website")
    db_session.add(project)
    await db_session.commit()
    await ledger.create_credit(project.id, "99.90", "Top-up", "01/02/2024")
    await db_session.commit()

    [line] = await budget_lines_view(ledger, project.id)

    assert line["amount"] == "99.90"
    assert line["date"] == "2024-02-01"
    assert line["comment"] == "Top-up"
    assert line["project_id"] == str(project.id)
