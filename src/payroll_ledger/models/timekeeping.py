"""Time report and ledger entry models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_ledger.models.base import Base, TimestampMixin


class TimekeepingReport(Base, TimestampMixin):
    """One uploaded time report, identified by the number in its filename."""

    __tablename__ = "timekeeping_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    report_id: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    entries: Mapped[list[TimekeepingEntry]] = relationship(
        back_populates="report",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TimekeepingEntry(Base):
    """Hours worked by one employee on one date, as uploaded."""

    __tablename__ = "timekeeping_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    report_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("timekeeping_reports.report_id", ondelete="CASCADE"),
        nullable=False,
    )
    work_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    hours_worked: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    employee_id: Mapped[int] = mapped_column(Integer, nullable=False)
    job_group: Mapped[str] = mapped_column(String(1), nullable=False)

    __table_args__ = (
        CheckConstraint("hours_worked >= 0", name="timekeeping_entries_hours_check"),
        Index("idx_timekeeping_report_id", "report_id"),
        Index("idx_timekeeping_employee_id", "employee_id"),
        Index("idx_timekeeping_date", "date"),
    )

    # Relationships
    report: Mapped[TimekeepingReport] = relationship(back_populates="entries")
