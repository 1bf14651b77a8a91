"""Type definitions for the ingestion and aggregation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PayPeriod:
    """Semi-monthly pay period: the 1st-15th or the 16th-end of a month."""

    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict[str, str]:
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
        }


@dataclass(frozen=True)
class LedgerRow:
    """A validated CSV row, ready to be written as a ledger entry."""

    line: int  # 1-based line in the uploaded file
    work_date: date
    hours_worked: Decimal
    employee_id: int
    job_group: str

    def to_insert_params(self, report_id: str) -> dict[str, Any]:
        return {
            "report_id": report_id,
            "work_date": self.work_date,
            "hours_worked": self.hours_worked,
            "employee_id": self.employee_id,
            "job_group": self.job_group,
        }


@dataclass(frozen=True)
class PayrollLine:
    """Total pay for one employee in one pay period."""

    employee_id: int
    pay_period: PayPeriod
    amount_paid: Decimal

    @property
    def sort_key(self) -> tuple[int, date]:
        # Numeric employee order, then chronological period order
        return (self.employee_id, self.pay_period.start_date)

    def formatted_amount(self) -> str:
        return f"${self.amount_paid.quantize(CENTS, rounding=ROUND_HALF_UP):.2f}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "employeeId": str(self.employee_id),
            "payPeriod": self.pay_period.to_dict(),
            "amountPaid": self.formatted_amount(),
        }
