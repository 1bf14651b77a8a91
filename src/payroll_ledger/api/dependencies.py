"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_ledger.calculators.rate_resolver import PayRateTable
from payroll_ledger.config import Settings, get_settings
from payroll_ledger.database import init_db


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        yield session


@lru_cache(maxsize=1)
def get_pay_rates() -> PayRateTable:
    """Rate table built from the PAY_RATES setting."""
    return PayRateTable.from_string(get_settings().pay_rates)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
PayRates = Annotated[PayRateTable, Depends(get_pay_rates)]
AppSettings = Annotated[Settings, Depends(get_settings)]
