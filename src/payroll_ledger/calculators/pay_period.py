"""Semi-monthly pay period resolution."""

from __future__ import annotations

import calendar
from datetime import date

from payroll_ledger.calculators.types import PayPeriod

MID_MONTH_DAY = 15


def resolve_pay_period(day: date | str) -> PayPeriod:
    """Return the pay period containing ``day``.

    Days 1-15 fall in the first half of the month, the rest in the second
    half, which ends on the month's last calendar day. A period never crosses
    into another month.

    Args:
        day: A date, or an ISO ``YYYY-MM-DD`` string

    Returns:
        The PayPeriod containing the day
    """
    if isinstance(day, str):
        day = date.fromisoformat(day)

    if day.day <= MID_MONTH_DAY:
        return PayPeriod(
            start_date=day.replace(day=1),
            end_date=day.replace(day=MID_MONTH_DAY),
        )

    last_day = calendar.monthrange(day.year, day.month)[1]
    return PayPeriod(
        start_date=day.replace(day=MID_MONTH_DAY + 1),
        end_date=day.replace(day=last_day),
    )
