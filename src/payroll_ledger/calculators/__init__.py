"""Pay period and pay rate calculations."""

from payroll_ledger.calculators.pay_period import resolve_pay_period
from payroll_ledger.calculators.rate_resolver import PayRateTable
from payroll_ledger.calculators.types import LedgerRow, PayPeriod, PayrollLine

__all__ = [
    "LedgerRow",
    "PayPeriod",
    "PayRateTable",
    "PayrollLine",
    "resolve_pay_period",
]
