"""API routes."""

from payroll_ledger.api.routes.health import router as health_router
from payroll_ledger.api.routes.reports import router as reports_router
from payroll_ledger.api.routes.uploads import router as uploads_router

__all__ = ["health_router", "reports_router", "uploads_router"]
