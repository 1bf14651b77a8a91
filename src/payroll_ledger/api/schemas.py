"""Pydantic schemas for API request/response models."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Upload schemas
# ============================================================================


class UploadResponse(CamelModel):
    """Schema for a stored upload."""

    message: str
    report_id: str
    filename: str
    entries_created: int


# ============================================================================
# Report schemas
# ============================================================================


class PayPeriodResponse(CamelModel):
    """Schema for a pay period."""

    start_date: date
    end_date: date


class EmployeeReport(CamelModel):
    """Schema for one employee's pay in one pay period."""

    employee_id: str
    pay_period: PayPeriodResponse
    amount_paid: str


class PayrollReport(CamelModel):
    """Schema for the payroll report body."""

    employee_reports: list[EmployeeReport]


class PayrollReportResponse(CamelModel):
    """Schema for the report endpoint response."""

    payroll_report: PayrollReport


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
