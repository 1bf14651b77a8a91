"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from payroll_ledger.api.routes import health_router, reports_router, uploads_router
from payroll_ledger.api.schemas import ErrorResponse
from payroll_ledger.config import get_settings
from payroll_ledger.database import create_schema, dispose_db
from payroll_ledger.exceptions import PayrollLedgerError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    if get_settings().create_schema_on_startup:
        await create_schema()
    yield
    # Shutdown
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Payroll Ledger API",
        description="Time report ingestion and semi-monthly payroll reporting",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Exception handlers
    @app.exception_handler(PayrollLedgerError)
    async def payroll_ledger_error_handler(
        request: Request, exc: PayrollLedgerError
    ) -> JSONResponse:
        """Render classified errors with their code and status."""
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.code)
        else:
            logger.warning(
                "%s %s rejected: %s %s",
                request.method,
                request.url.path,
                exc.code,
                exc.message,
            )
        body = ErrorResponse(detail=exc.message, code=exc.code, context=exc.context)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(uploads_router)
    app.include_router(reports_router)

    return app


# Default app instance for uvicorn
app = create_app()
