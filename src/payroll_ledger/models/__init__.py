"""ORM models for uploaded time reports and their ledger entries."""

from payroll_ledger.models.base import Base, TimestampMixin
from payroll_ledger.models.timekeeping import TimekeepingEntry, TimekeepingReport

__all__ = [
    "Base",
    "TimestampMixin",
    "TimekeepingEntry",
    "TimekeepingReport",
]
