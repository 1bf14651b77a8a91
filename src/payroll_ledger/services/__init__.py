"""Payroll ledger services."""

from payroll_ledger.services.csv_reader import REQUIRED_HEADERS, TimeReportReader
from payroll_ledger.services.report_service import (
    PayrollReportService,
    aggregate_payroll,
    render_report,
)
from payroll_ledger.services.upload_service import UploadResult, UploadService

__all__ = [
    "REQUIRED_HEADERS",
    "TimeReportReader",
    "PayrollReportService",
    "aggregate_payroll",
    "render_report",
    "UploadResult",
    "UploadService",
]
