from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from project_budget.config import settings
from project_budget.core.clock import Clock, system_clock
from project_budget.services.budget_service import BudgetLedger

engine = create_async_engine(settings.database_url, echo=settings.debug)
async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped session; roll back if the request fails."""
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


def get_clock() -> Clock:
    return system_clock


def get_ledger(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> BudgetLedger:
    return BudgetLedger(db, clock=clock, base_currency=settings.base_currency)
