"""Time report upload endpoint."""

from typing import Annotated

from fastapi import APIRouter, File, UploadFile, status

from payroll_ledger.api.dependencies import AppSettings, DbSession
from payroll_ledger.api.schemas import ErrorResponse, UploadResponse
from payroll_ledger.exceptions import NoFileProvided
from payroll_ledger.services.staging import stage_upload
from payroll_ledger.services.upload_service import UPLOAD_SUCCESS_MESSAGE, UploadService

router = APIRouter(tags=["uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def upload_time_report(
    db: DbSession,
    settings: AppSettings,
    file: Annotated[UploadFile | None, File()] = None,
) -> UploadResponse:
    """Store a time-report-<id>.csv upload as a report and its ledger entries."""
    if file is None or not file.filename:
        raise NoFileProvided()

    staged_path = await stage_upload(file, settings.upload_dir, settings.max_upload_bytes)
    result = await UploadService(db).ingest(staged_path, file.filename)

    return UploadResponse(
        message=UPLOAD_SUCCESS_MESSAGE,
        report_id=result.report_id,
        filename=result.filename,
        entries_created=result.entries_created,
    )
