"""Ingestion of time report uploads into the ledger."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_ledger.exceptions import (
    DuplicateReport,
    InvalidFilenameFormat,
    StorageFailure,
    UnsupportedFileType,
)
from payroll_ledger.models import TimekeepingEntry, TimekeepingReport
from payroll_ledger.services.csv_reader import TimeReportReader
from payroll_ledger.services.staging import remove_staged_file

logger = logging.getLogger(__name__)

CSV_EXTENSION = ".csv"
FILENAME_PATTERN = re.compile(r"time-report-([0-9]+)")

UPLOAD_SUCCESS_MESSAGE = "File uploaded and data stored successfully"


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a successful ingestion."""

    report_id: str
    filename: str
    entries_created: int


def base_filename(filename: str) -> str:
    """Strip any directory part a client sent along with the name."""
    return PurePosixPath(filename.replace("\\", "/")).name


def check_extension(filename: str) -> None:
    """Raise UnsupportedFileType unless the name ends in .csv (any case)."""
    if PurePosixPath(filename).suffix.lower() != CSV_EXTENSION:
        raise UnsupportedFileType(filename)


def report_id_from_filename(filename: str) -> str:
    """Extract the report id from a ``time-report-<digits>.csv`` name.

    Raises:
        InvalidFilenameFormat: If the name without extension does not match
    """
    stem = PurePosixPath(filename).stem
    match = FILENAME_PATTERN.fullmatch(stem)
    if not match:
        raise InvalidFilenameFormat(filename)
    return match.group(1)


class UploadService:
    """Validates a staged time report and writes it to the ledger.

    Key invariants:
    1. A report and all of its entries are written in one transaction
    2. Any validation or storage error leaves nothing persisted
    3. Report ids are unique; re-uploads are rejected, never merged
    4. The staged upload is removed on every exit path
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def ingest(self, staged_path: Path, filename: str) -> UploadResult:
        """Ingest a staged upload and delete it afterwards.

        Args:
            staged_path: Where the upload was staged on local disk
            filename: The original filename given by the client

        Returns:
            UploadResult describing the stored report

        Raises:
            IngestionError: For any problem the caller can fix
            StorageFailure: If the store failed; everything is rolled back
        """
        try:
            return await self._ingest(staged_path, base_filename(filename))
        finally:
            remove_staged_file(staged_path)

    async def _ingest(self, staged_path: Path, filename: str) -> UploadResult:
        check_extension(filename)
        report_id = report_id_from_filename(filename)
        # Decoded only after the duplicate check
        content = staged_path.read_bytes()

        try:
            async with self.session.begin():
                if await self.report_exists(report_id):
                    raise DuplicateReport(report_id)

                reader = TimeReportReader.from_bytes(content)
                reader.read_header()
                rows = list(reader.rows())

                self.session.add(TimekeepingReport(report_id=report_id, filename=filename))
                try:
                    await self.session.flush()
                except IntegrityError:
                    # Lost a race with a concurrent upload of the same report
                    raise DuplicateReport(report_id) from None

                await self.session.execute(
                    insert(TimekeepingEntry),
                    [row.to_insert_params(report_id) for row in rows],
                )
        except SQLAlchemyError as e:
            logger.exception("Storing report %s from %s failed", report_id, filename)
            raise StorageFailure("ingest") from e

        logger.info(
            "Stored report %s from %s with %d entries", report_id, filename, len(rows)
        )
        return UploadResult(
            report_id=report_id,
            filename=filename,
            entries_created=len(rows),
        )

    async def report_exists(self, report_id: str) -> bool:
        result = await self.session.execute(
            select(TimekeepingReport.id).where(TimekeepingReport.report_id == report_id)
        )
        return result.first() is not None
