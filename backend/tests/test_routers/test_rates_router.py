import uuid
from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from project_budget.config import settings
from project_budget.models.project import Project
from project_budget.models.user import User


async def _setup(db: AsyncSession):
    project = Project(name="Website redesign")
    user = User(username="carol", name="Carol")
    db.add_all([project, user])
    await db.commit()
    return project, user


@pytest.mark.asyncio
async def test_create_and_list_rates(client: AsyncClient, db_session: AsyncSession):
    project, user = await _setup(db_session)

    for rate, effective in (("30", "2024-01-01T00:00:00Z"), ("45", "2024-06-01T00:00:00Z")):
        resp = await client.post(
            f"/projects/{project.id}/rates",
            json={"user_id": str(user.id), "rate": rate, "currency": "eur", "effective_from": effective},
        )
        assert resp.status_code == 201
        assert resp.json()["currency"] == "EUR"

    rates = (await client.get(f"/projects/{project.id}/rates")).json()
    assert [Decimal(r["rate"]) for r in rates] == [Decimal("45"), Decimal("30")]


@pytest.mark.asyncio
async def test_create_rate_unknown_user(client: AsyncClient, db_session: AsyncSession):
    project, _ = await _setup(db_session)

    resp = await client.post(
        f"/projects/{project.id}/rates",
        json={"user_id": str(uuid.uuid4()), "rate": "30", "effective_from": "2024-01-01T00:00:00Z"},
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_create_rate_rejects_negative(client: AsyncClient, db_session: AsyncSession):
    project, user = await _setup(db_session)

    resp = await client.post(
        f"/projects/{project.id}/rates",
        json={"user_id": str(user.id), "rate": "-1", "effective_from": "2024-01-01T00:00:00Z"},
    )
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Validation error"


@pytest.mark.asyncio
async def test_delete_rate(client: AsyncClient, db_session: AsyncSession):
    project, user = await _setup(db_session)
    created = (
        await client.post(
            f"/projects/{project.id}/rates",
            json={"user_id": str(user.id), "rate": "30", "effective_from": "2024-01-01T00:00:00Z"},
        )
    ).json()

    assert (await client.delete(f"/projects/{project.id}/rates/{created['id']}")).status_code == 204
    assert (await client.delete(f"/projects/{project.id}/rates/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_create_rate_defaults_to_base_currency(client: AsyncClient, db_session: AsyncSession):
    project, user = await _setup(db_session)

    resp = await client.post(
        f"/projects/{project.id}/rates",
        json={"user_id": str(user.id), "rate": "30", "effective_from": "2024-01-01T00:00:00Z"},
    )
    assert resp.status_code == 201
    assert resp.json()["currency"] == settings.base_currency


@pytest.mark.asyncio
async def test_list_rates_latest_entered_first_on_same_day(client: AsyncClient, db_session: AsyncSession):
    project, user = await _setup(db_session)

    for rate in ("30", "35"):
        await client.post(
            f"/projects/{project.id}/rates",
            json={"user_id": str(user.id), "rate": rate, "effective_from": "2024-01-01T00:00:00Z"},
        )

    rates = (await client.get(f"/projects/{project.id}/rates")).json()
    assert [Decimal(r["rate"]) for r in rates] == [Decimal("35"), Decimal("30")]
    assert rates[0]["effective_from"].startswith("2024-01-01T00:00:00")
