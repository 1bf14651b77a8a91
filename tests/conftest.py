"""Pytest fixtures for payroll ledger tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from dataclasses import replace
from decimal import Decimal
from itertools import count
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from payroll_ledger.api.app import create_app
from payroll_ledger.api.dependencies import get_db_session, get_pay_rates
from payroll_ledger.calculators.rate_resolver import PayRateTable
from payroll_ledger.config import get_settings
from payroll_ledger.database import create_engine_for_url, create_schema, make_session_factory
from payroll_ledger.models import TimekeepingEntry, TimekeepingReport

# In-memory SQLite shared through one connection
TEST_DATABASE_URL = "sqlite+aiosqlite://"

FIXTURES_DIR = Path(__file__).parent / "fixtures"

HEADER = "date,hours worked,employee id,job group"

# Reference rows; the first part of each date is the year
SCENARIO_CSV = "\n".join(
    [
        HEADER,
        "2023/04/01,10,1,A",
        "2023/14/01,5,1,A",
        "2023/20/01,3,2,B",
        "2023/20/01,4,1,A",
    ]
)

SCENARIO_REPORT = {
    "payrollReport": {
        "employeeReports": [
            {
                "employeeId": "1",
                "payPeriod": {"startDate": "2023-01-01", "endDate": "2023-01-15"},
                "amountPaid": "$450.00",
            },
            {
                "employeeId": "1",
                "payPeriod": {"startDate": "2023-01-16", "endDate": "2023-01-31"},
                "amountPaid": "$120.00",
            },
            {
                "employeeId": "2",
                "payPeriod": {"startDate": "2023-01-16", "endDate": "2023-01-31"},
                "amountPaid": "$60.00",
            },
        ]
    }
}


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with the schema applied."""
    engine = create_engine_for_url(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def pay_rates() -> PayRateTable:
    """Rates used by the reference scenario: A=30, B=20."""
    return PayRateTable({"A": Decimal("30"), "B": Decimal("20")})


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def stage_csv(upload_dir: Path) -> Callable[[str | bytes], Path]:
    """Write content into the upload directory as a staged upload."""
    counter = count(1)

    def _stage(content: str | bytes) -> Path:
        path = upload_dir / f"upload-{next(counter)}"
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
        return path

    return _stage


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    upload_dir: Path,
    pay_rates: PayRateTable,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client wired to the test database."""
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    test_settings = replace(get_settings(), upload_dir=upload_dir, max_upload_bytes=16 * 1024)

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_pay_rates] = lambda: pay_rates
    app.dependency_overrides[get_settings] = lambda: test_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def count_rows(session_factory: async_sessionmaker[AsyncSession]) -> tuple[int, int]:
    """Return (reports, entries) currently committed."""
    async with session_factory() as session:
        reports = await session.scalar(select(func.count()).select_from(TimekeepingReport))
        entries = await session.scalar(select(func.count()).select_from(TimekeepingEntry))
    return reports or 0, entries or 0
