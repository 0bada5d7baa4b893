"""Currency routes: conversion rates into the base currency."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from project_budget.config import settings
from project_budget.dependencies import get_db
from project_budget.models.currency import Currency
from project_budget.schemas.budget import CurrencyRateRead, CurrencyRateSet
from project_budget.services import currency_service

router = APIRouter(prefix="/currencies", tags=["currencies"])


@router.get("", response_model=list[CurrencyRateRead])
async def list_currencies(
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Currency).order_by(Currency.currency))
    return list(result.scalars().all())


@router.put("/{code}", response_model=CurrencyRateRead)
async def set_currency_rate(
    code: str,
    body: CurrencyRateSet,
    db: AsyncSession = Depends(get_db),
):
    """Create or replace how many base currency units one unit of `code` is worth."""
    if len(code) != 3 or not code.isalpha():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid currency code")
    if code.upper() == settings.base_currency.upper():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The base currency has no conversion rate",
        )

    record = await currency_service.set_rate(db, currency=code, rate=body.rate)
    await db.commit()
    return record
