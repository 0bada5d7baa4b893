"""Currency service: convert hourly rates into the base currency.

Conversion rates live in the `currencies` table as "1 unit of X = rate units
of base". The whole table is read once per computation and handed around as a
CurrencyConverter, so cost annotation never queries per record.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from project_budget.models.currency import Currency


class CurrencyConverter:
    """Converts raw prices into the base currency.

    The base currency passes through unchanged. So does any currency without
    a known conversion rate.
    """

    def __init__(self, base_currency: str, rates: dict[str, Decimal] | None = None) -> None:
        self.base_currency = base_currency.upper()
        self._rates = {code.upper(): rate for code, rate in (rates or {}).items()}

    def get_price(self, currency: str, price: Decimal) -> Decimal:
        code = (currency or self.base_currency).upper()
        if code == self.base_currency:
            return price
        rate = self._rates.get(code)
        if rate is None:
            return price
        return price * rate


async def load_converter(db: AsyncSession, base_currency: str) -> CurrencyConverter:
    """Build a converter from every stored conversion rate."""
    result = await db.execute(select(Currency))
    rates = {c.currency: c.rate for c in result.scalars().all()}
    return CurrencyConverter(base_currency, rates)


async def set_rate(db: AsyncSession, *, currency: str, rate: Decimal) -> Currency:
    """Create or replace the conversion rate for a currency."""
    code = currency.upper()
    existing = await db.get(Currency, code)
    if existing is not None:
        existing.rate = rate
        await db.flush()
        return existing

    record = Currency(currency=code, rate=rate)
    db.add(record)
    await db.flush()
    return record
