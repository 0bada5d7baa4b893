from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from project_budget.services import currency_service
from project_budget.services.currency_service import CurrencyConverter


def test_base_currency_passes_through():
    converter = CurrencyConverter("USD", {"USD": Decimal("2")})
    assert converter.get_price("usd", Decimal("20")) == Decimal("20")


def test_known_currency_is_converted():
    converter = CurrencyConverter("USD", {"eur": Decimal("1.25")})
    assert converter.get_price("EUR", Decimal("20")) == Decimal("25.00")


def test_unknown_currency_passes_through():
    converter = CurrencyConverter("USD")
    assert converter.get_price("GBP", Decimal("20")) == Decimal("20")


@pytest.mark.asyncio
async def test_load_converter_reads_stored_rates(db_session: AsyncSession):
    await currency_service.set_rate(db_session, currency="eur", rate=Decimal("1.1"))
    await currency_service.set_rate(db_session, currency="EUR", rate=Decimal("1.2"))
    await db_session.commit()

    converter = await currency_service.load_converter(db_session, "USD")

    assert converter.get_price("EUR", Decimal("10")) == Decimal("12.000000")
