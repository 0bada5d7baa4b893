"""Budget routes: daily chart data, cost breakdown, budget lines. Returns derived views."""

import uuid as uuid_mod

from fastapi import APIRouter, Depends, HTTPException, Response, status

from project_budget.config import settings
from project_budget.dependencies import get_ledger
from project_budget.derived_views.budget import (
    breakdown_page_view,
    budget_line_view,
    budget_lines_view,
    budget_overview_view,
)
from project_budget.models.budget import BudgetLine
from project_budget.models.project import Project
from project_budget.schemas.budget import BudgetLineCreate
from project_budget.services.budget_service import BreakdownFilters, BudgetLedger

router = APIRouter(prefix="/projects/{project_id}/budget", tags=["budget"])


def _parse_uuid(value: str, name: str) -> uuid_mod.UUID:
    try:
        return uuid_mod.UUID(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {name}",
        )


async def _get_project(ledger: BudgetLedger, project_id: str) -> Project:
    project = await ledger.get_project(_parse_uuid(project_id, "project_id"))
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("")
async def show(
    project_id: str,
    ledger: BudgetLedger = Depends(get_ledger),
):
    project = await _get_project(ledger, project_id)
    return await budget_overview_view(ledger, project)


@router.get("/breakdown")
async def breakdown(
    project_id: str,
    user_id: str | None = None,
    page: int = 1,
    ledger: BudgetLedger = Depends(get_ledger),
):
    project = await _get_project(ledger, project_id)
    if page < 1:
        raise HTTPException(status_code=400, detail="Page must be 1 or greater")

    filters = BreakdownFilters(
        user_id=_parse_uuid(user_id, "user_id") if user_id else None,
    )
    return await breakdown_page_view(
        ledger,
        project.id,
        filters=filters,
        page=page,
        per_page=settings.breakdown_page_size,
    )


@router.get("/lines")
async def list_lines(
    project_id: str,
    ledger: BudgetLedger = Depends(get_ledger),
):
    project = await _get_project(ledger, project_id)
    return await budget_lines_view(ledger, project.id)


@router.post("/lines", status_code=201)
async def create_line(
    project_id: str,
    body: BudgetLineCreate,
    ledger: BudgetLedger = Depends(get_ledger),
):
    project = await _get_project(ledger, project_id)
    result = await ledger.create_credit(
        project.id,
        body.amount,
        comment=body.comment,
        date=body.date,
    )
    if not result.valid:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Validation error", "errors": result.errors},
        )
    await ledger.db.commit()

    line = await ledger.db.get(BudgetLine, result.budget_id)
    return budget_line_view(line)


@router.delete("/lines/{budget_id}", status_code=204)
async def remove_line(
    project_id: str,
    budget_id: str,
    ledger: BudgetLedger = Depends(get_ledger),
):
    project = await _get_project(ledger, project_id)
    removed = await ledger.remove_credit(
        _parse_uuid(budget_id, "budget_id"), project_id=project.id
    )
    if not removed:
        raise HTTPException(status_code=404, detail="Budget line not found")
    await ledger.db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
