"""Hourly rate routes: list, add and remove a project's user rates."""

import uuid as uuid_mod

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from project_budget.dependencies import get_db
from project_budget.models.project import Project
from project_budget.models.user import User
from project_budget.schemas.budget import HourlyRateCreate, HourlyRateRead
from project_budget.services import rate_service

router = APIRouter(prefix="/projects/{project_id}/rates", tags=["rates"])


async def _get_project(db: AsyncSession, project_id: str) -> Project:
    try:
        pid = uuid_mod.UUID(project_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid project_id")
    project = await db.get(Project, pid)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("", response_model=list[HourlyRateRead])
async def list_rates(
    project_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Rates of a project, latest effective date first."""
    project = await _get_project(db, project_id)
    records = await rate_service.get_all_by_project(db, project.id)
    return list(reversed(records))


@router.post("", response_model=HourlyRateRead, status_code=201)
async def create_rate(
    project_id: str,
    body: HourlyRateCreate,
    db: AsyncSession = Depends(get_db),
):
    project = await _get_project(db, project_id)
    if await db.get(User, body.user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")

    rate = await rate_service.create_rate(
        db,
        project_id=project.id,
        user_id=body.user_id,
        rate=body.rate,
        currency=body.currency,
        effective_from=body.effective_from,
    )
    await db.commit()
    return rate_service.to_record(rate)


@router.delete("/{rate_id}", status_code=204)
async def remove_rate(
    project_id: str,
    rate_id: str,
    db: AsyncSession = Depends(get_db),
):
    project = await _get_project(db, project_id)
    try:
        rid = uuid_mod.UUID(rate_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid rate_id")

    if not await rate_service.remove_rate(db, project_id=project.id, rate_id=rid):
        raise HTTPException(status_code=404, detail="Rate not found")
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
