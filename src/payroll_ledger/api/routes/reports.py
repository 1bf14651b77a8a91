"""Payroll report endpoint."""

from fastapi import APIRouter

from payroll_ledger.api.dependencies import DbSession, PayRates
from payroll_ledger.api.schemas import ErrorResponse, PayrollReportResponse
from payroll_ledger.services.report_service import PayrollReportService, render_report

router = APIRouter(tags=["reports"])


@router.get(
    "/report",
    response_model=PayrollReportResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_payroll_report(db: DbSession, rates: PayRates) -> PayrollReportResponse:
    """Pay per employee and pay period across every uploaded report."""
    lines = await PayrollReportService(db, rates).generate()
    return PayrollReportResponse.model_validate(render_report(lines))
