"""Two-phase reader for uploaded time report CSV files.

The header is validated first; only then can the data rows be read. Rows are
produced from the decoded text each time ``rows()`` is called, so a reader can
be iterated more than once.
"""

from __future__ import annotations

import csv
import io
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterator

from payroll_ledger.calculators.types import LedgerRow
from payroll_ledger.exceptions import (
    EmptyFile,
    HeadersNotFound,
    InvalidDateFormat,
    MalformedRow,
    MissingHeaders,
)

DATE = "date"
HOURS_WORKED = "hours worked"
EMPLOYEE_ID = "employee id"
JOB_GROUP = "job group"

REQUIRED_HEADERS = (DATE, HOURS_WORKED, EMPLOYEE_ID, JOB_GROUP)

MAX_HOURS = Decimal("999.99")

# Bounds of the 32-bit INTEGER employee_id column
MIN_EMPLOYEE_ID = -(2**31)
MAX_EMPLOYEE_ID = 2**31 - 1

DATE_PART_PATTERN = re.compile(r"[0-9]+")
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def normalize_header(name: str) -> str:
    return name.strip().lstrip("\ufeff").strip().lower()


def parse_report_date(value: str, line: int) -> date:
    """Parse a ``DD/MM/YYYY`` date.

    When the first part has four digits the value is read as ``YYYY/DD/MM``,
    the layout written by the timekeeping export.

    Raises:
        InvalidDateFormat: If the value is not three ``/``-separated numbers
            forming a real calendar date
    """
    parts = [part.strip() for part in value.split("/")]
    if len(parts) != 3 or not all(DATE_PART_PATTERN.fullmatch(part) for part in parts):
        raise InvalidDateFormat(line, value)

    if len(parts[0]) == 4:
        year, day, month = parts
    else:
        day, month, year = parts

    if len(year) != 4:
        raise InvalidDateFormat(line, value)

    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        raise InvalidDateFormat(line, value) from None


def parse_hours(value: str, line: int) -> Decimal:
    try:
        hours = Decimal(value)
    except InvalidOperation:
        raise MalformedRow(line, HOURS_WORKED, f"{value!r} is not a number") from None

    if not hours.is_finite():
        raise MalformedRow(line, HOURS_WORKED, f"{value!r} is not a number")
    if hours < 0:
        raise MalformedRow(line, HOURS_WORKED, "must not be negative")
    if hours.as_tuple().exponent < -2:
        raise MalformedRow(line, HOURS_WORKED, "at most two decimal places allowed")
    if hours > MAX_HOURS:
        raise MalformedRow(line, HOURS_WORKED, f"must not exceed {MAX_HOURS}")
    return hours.quantize(Decimal("0.01"))


def parse_employee_id(value: str, line: int) -> int:
    if not INTEGER_PATTERN.fullmatch(value):
        raise MalformedRow(line, EMPLOYEE_ID, f"{value!r} is not an integer")

    employee_id = int(value)
    if not MIN_EMPLOYEE_ID <= employee_id <= MAX_EMPLOYEE_ID:
        raise MalformedRow(line, EMPLOYEE_ID, f"{value!r} is out of range")
    return employee_id


def parse_job_group(value: str, line: int) -> str:
    # Some characters grow when upper-cased ("ß" -> "SS")
    code = value.upper()
    if len(code) != 1:
        raise MalformedRow(line, JOB_GROUP, f"{value!r} is not a single character code")
    return code


class TimeReportReader:
    """Reads and validates the contents of one time report upload."""

    def __init__(self, text: str):
        self.text = text
        self._columns: dict[str, int] | None = None

    @classmethod
    def from_bytes(cls, content: bytes) -> TimeReportReader:
        try:
            return cls(content.decode("utf-8-sig"))
        except UnicodeDecodeError:
            raise HeadersNotFound() from None

    def _records(self) -> Iterator[list[str]]:
        return csv.reader(io.StringIO(self.text, newline=""))

    def read_header(self) -> list[str]:
        """Validate the header row and remember where each column lives.

        Returns:
            The normalized header names, in file order

        Raises:
            HeadersNotFound: If the file has no usable first row
            MissingHeaders: If any required column is absent
        """
        records = self._records()
        try:
            header = next(records)
        except StopIteration:
            raise HeadersNotFound() from None
        except csv.Error:
            raise HeadersNotFound() from None

        names = [normalize_header(name) for name in header]
        if not any(names):
            raise HeadersNotFound()

        missing = [name for name in REQUIRED_HEADERS if name not in names]
        if missing:
            raise MissingHeaders(missing)

        self._columns = {name: names.index(name) for name in REQUIRED_HEADERS}
        return names

    def _raw_rows(self) -> Iterator[tuple[int, list[str]]]:
        """Yield (file line, cells) for every data row that is not blank."""
        records = self._records()
        try:
            next(records)
            for cells in records:
                if all(not cell.strip() for cell in cells):
                    continue
                yield records.line_num, cells
        except csv.Error as e:
            raise MalformedRow(records.line_num, None, str(e)) from e

    def _validate(self, line: int, cells: list[str]) -> LedgerRow:
        assert self._columns is not None

        values = {}
        for name, index in self._columns.items():
            value = cells[index].strip() if index < len(cells) else ""
            if not value:
                raise MalformedRow(line, name, "missing required field")
            values[name] = value

        return LedgerRow(
            line=line,
            work_date=parse_report_date(values[DATE], line),
            hours_worked=parse_hours(values[HOURS_WORKED], line),
            employee_id=parse_employee_id(values[EMPLOYEE_ID], line),
            job_group=parse_job_group(values[JOB_GROUP], line),
        )

    def rows(self) -> Iterator[LedgerRow]:
        """Yield validated rows, reading the header first if needed.

        Raises:
            EmptyFile: If no non-blank data row exists
            MalformedRow: If a row is missing a field or holds a bad value
            InvalidDateFormat: If a row's date cannot be parsed
        """
        if self._columns is None:
            self.read_header()

        raw_rows = list(self._raw_rows())
        if not raw_rows:
            raise EmptyFile()

        for line, cells in raw_rows:
            yield self._validate(line, cells)
