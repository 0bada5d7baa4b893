import uuid
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from project_budget.models.budget import BudgetLine
from project_budget.models.project import Project


@pytest.mark.asyncio
async def test_budget_line_round_trip(db_session: AsyncSession):
    project = Project(name="Website")
    db_session.add(project)
    await db_session.commit()

    db_session.add(
        BudgetLine(project_id=project.id, amount=Decimal("-12.34"), comment="Refund", date=date(2024, 2, 29))
    )
    await db_session.commit()

    result = await db_session.execute(select(BudgetLine).where(BudgetLine.project_id == project.id))
    fetched = result.scalar_one()
    assert fetched.amount == Decimal("-12.34")
    assert fetched.date == date(2024, 2, 29)
    assert fetched.comment == "Refund"
    assert fetched.created_at is not None


@pytest.mark.asyncio
async def test_budget_line_requires_existing_project(db_session: AsyncSession):
    db_session.add(BudgetLine(project_id=uuid.uuid4(), amount=Decimal("10"), comment="", date=date(2024, 1, 1)))
    with pytest.raises(IntegrityError):
        await db_session.commit()
