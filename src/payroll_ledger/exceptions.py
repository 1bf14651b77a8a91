"""Typed errors raised by ingestion and reporting.

Every error carries a machine-readable ``code`` and the HTTP status class the
API answers with. Caller-input errors derive from ``IngestionError`` and hold
enough ``context`` to correct the upload; nothing is persisted when one is
raised.

    PayrollLedgerError
    +-- IngestionError                 (4xx)
    |   +-- NoFileProvided
    |   +-- UnsupportedFileType
    |   +-- InvalidFilenameFormat
    |   +-- DuplicateReport            (409)
    |   +-- FileTooLarge               (413)
    |   +-- HeadersNotFound
    |   +-- MissingHeaders
    |   +-- EmptyFile
    |   +-- MalformedRow
    |   +-- InvalidDateFormat
    +-- StorageFailure                 (500)
    +-- RateNotConfigured              (500)
"""

from __future__ import annotations

from typing import Any


class PayrollLedgerError(Exception):
    """Base class for all payroll ledger errors."""

    code: str = "PAYROLL_LEDGER_ERROR"
    status_code: int = 500

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context
        super().__init__(message)


class IngestionError(PayrollLedgerError):
    """Upload rejected because of something the caller can fix."""

    code = "INGESTION_ERROR"
    status_code = 400


class NoFileProvided(IngestionError):
    code = "NO_FILE_PROVIDED"

    def __init__(self) -> None:
        super().__init__("No file uploaded")


class UnsupportedFileType(IngestionError):
    code = "UNSUPPORTED_FILE_TYPE"

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__("Only CSV files are allowed", {"filename": filename})


class InvalidFilenameFormat(IngestionError):
    code = "INVALID_FILENAME_FORMAT"

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            "Invalid file name format. Expected format: time-report-x.csv",
            {"filename": filename},
        )


class DuplicateReport(IngestionError):
    code = "DUPLICATE_REPORT"
    status_code = 409

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(
            f"Report ID {report_id} already exists", {"report_id": report_id}
        )


class FileTooLarge(IngestionError):
    code = "FILE_TOO_LARGE"
    status_code = 413

    def __init__(self, limit_bytes: int):
        self.limit_bytes = limit_bytes
        super().__init__(
            f"File exceeds the upload limit of {limit_bytes} bytes",
            {"limit_bytes": limit_bytes},
        )


class HeadersNotFound(IngestionError):
    code = "HEADERS_NOT_FOUND"

    def __init__(self) -> None:
        super().__init__("CSV format error: Headers not found")


class MissingHeaders(IngestionError):
    code = "MISSING_HEADERS"

    def __init__(self, missing_headers: list[str]):
        self.missing_headers = missing_headers
        super().__init__(
            f"CSV format error: Missing headers: {', '.join(missing_headers)}",
            {"missing_headers": missing_headers},
        )


class EmptyFile(IngestionError):
    code = "EMPTY_FILE"

    def __init__(self) -> None:
        super().__init__("Invalid CSV format: File Empty")


class MalformedRow(IngestionError):
    """A data row is missing a required field or holds an unusable value."""

    code = "MALFORMED_ROW"

    def __init__(self, line: int, column: str | None, reason: str):
        self.line = line
        self.column = column
        self.reason = reason
        where = f"row {line}, column '{column}'" if column else f"row {line}"
        super().__init__(
            f"CSV format error: {where}: {reason}",
            {"line": line, "column": column},
        )


class InvalidDateFormat(IngestionError):
    code = "INVALID_DATE_FORMAT"

    def __init__(self, line: int, value: str):
        self.line = line
        self.value = value
        super().__init__(
            f"CSV format error: Invalid date format in row {line}: {value!r}",
            {"line": line, "value": value},
        )


class StorageFailure(PayrollLedgerError):
    """The store failed; details are logged, never returned to callers."""

    code = "STORAGE_FAILURE"
    status_code = 500

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__("Internal server error")


class RateNotConfigured(PayrollLedgerError):
    """A ledger entry references a job group missing from the rate table."""

    code = "RATE_NOT_CONFIGURED"
    status_code = 500

    def __init__(self, job_group: str):
        self.job_group = job_group
        super().__init__(
            f"No pay rate configured for job group {job_group!r}",
            {"job_group": job_group},
        )
