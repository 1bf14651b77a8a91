"""Payroll report aggregation over all stored ledger entries."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_ledger.calculators.pay_period import resolve_pay_period
from payroll_ledger.calculators.rate_resolver import PayRateTable
from payroll_ledger.calculators.types import PayPeriod, PayrollLine
from payroll_ledger.exceptions import StorageFailure
from payroll_ledger.models import TimekeepingEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryRecord:
    """The ledger columns the aggregation reads."""

    work_date: date
    hours_worked: Decimal
    employee_id: int
    job_group: str


def aggregate_payroll(
    entries: Iterable[EntryRecord],
    rates: PayRateTable,
) -> list[PayrollLine]:
    """Sum pay per (employee, pay period) and return lines in report order.

    The result does not depend on the order of ``entries``: lines are sorted
    by numeric employee id, then by pay period start.

    Raises:
        RateNotConfigured: If an entry's job group has no rate
    """
    totals: dict[tuple[int, PayPeriod], Decimal] = defaultdict(lambda: Decimal("0"))

    for entry in entries:
        rate = rates.resolve_rate(entry.job_group)
        period = resolve_pay_period(entry.work_date)
        totals[(entry.employee_id, period)] += Decimal(entry.hours_worked) * rate

    lines = [
        PayrollLine(employee_id=employee_id, pay_period=period, amount_paid=amount)
        for (employee_id, period), amount in totals.items()
    ]
    lines.sort(key=lambda line: line.sort_key)
    return lines


def render_report(lines: Iterable[PayrollLine]) -> dict[str, Any]:
    """Shape pay lines as the ``payrollReport`` document."""
    return {"payrollReport": {"employeeReports": [line.to_dict() for line in lines]}}


class PayrollReportService:
    """Builds the payroll report from every stored ledger entry."""

    def __init__(self, session: AsyncSession, rates: PayRateTable):
        self.session = session
        self.rates = rates

    async def load_entries(self) -> list[EntryRecord]:
        """Read all ledger entries in a single query.

        Raises:
            StorageFailure: If the read fails
        """
        query = select(
            TimekeepingEntry.work_date,
            TimekeepingEntry.hours_worked,
            TimekeepingEntry.employee_id,
            TimekeepingEntry.job_group,
        ).order_by(TimekeepingEntry.employee_id, TimekeepingEntry.work_date)

        try:
            result = await self.session.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.exception("Reading ledger entries failed")
            raise StorageFailure("report") from e

        return [
            EntryRecord(
                work_date=row.work_date,
                hours_worked=row.hours_worked,
                employee_id=row.employee_id,
                job_group=row.job_group,
            )
            for row in rows
        ]

    async def generate(self) -> list[PayrollLine]:
        """Generate the sorted payroll lines. Deterministic for a given ledger."""
        entries = await self.load_entries()
        lines = aggregate_payroll(entries, self.rates)
        logger.info(
            "Generated payroll report: %d entries into %d lines", len(entries), len(lines)
        )
        return lines
