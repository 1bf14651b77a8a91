"""Hourly pay rate resolution by job group."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Mapping

from payroll_ledger.exceptions import RateNotConfigured


@dataclass(frozen=True)
class PayRateTable:
    """Flat job-group to hourly-rate mapping.

    The table is per-deployment configuration, built once from settings and
    injected wherever pay is computed. Job group codes are matched
    case-insensitively.

    Attributes:
        rates: Job group code -> hourly rate
    """

    rates: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Normalize codes and validate rates."""
        normalized: dict[str, Decimal] = {}
        for code, rate in self.rates.items():
            code = code.strip().upper()
            if len(code) != 1:
                raise ValueError(f"Job group code must be one character: {code!r}")
            rate = Decimal(str(rate))
            if rate < 0:
                raise ValueError(f"Pay rate for job group {code} cannot be negative")
            normalized[code] = rate
        object.__setattr__(self, "rates", MappingProxyType(normalized))

    @classmethod
    def from_string(cls, text: str) -> PayRateTable:
        """Parse ``"A=30,B=20"`` into a rate table."""
        rates: dict[str, Decimal] = {}
        for item in text.split(","):
            item = item.strip()
            if not item:
                continue
            code, sep, amount = item.partition("=")
            if not sep:
                raise ValueError(f"Invalid pay rate entry {item!r}, expected CODE=RATE")
            try:
                rates[code] = Decimal(amount.strip())
            except InvalidOperation:
                raise ValueError(f"Invalid pay rate amount in {item!r}") from None
        return cls(rates)

    def resolve_rate(self, job_group: str) -> Decimal:
        """Return the hourly rate for a job group.

        Raises:
            RateNotConfigured: If the table has no rate for the job group
        """
        try:
            return self.rates[job_group.strip().upper()]
        except KeyError:
            raise RateNotConfigured(job_group) from None

    def __contains__(self, job_group: object) -> bool:
        return isinstance(job_group, str) and job_group.strip().upper() in self.rates
