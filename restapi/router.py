"""Application configuration and router setup."""

import logging

import fastapi
from fastapi.middleware import cors
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from components.core import init_db, schemas
from components.core.config import get_settings
from components.core.exceptions import (
    BackupFormatError,
    FinanceTrackerError,
    InvalidDateError,
    InvalidScheduleParamsError,
    PaymentNotFoundError,
    PersistenceError,
    PlanNotFoundError,
    RecordNotFoundError,
)
from components.core.logging_config import configure_logging
from restapi.endpoints import account, backup, dashboard, health_check, installment, ledger

logger = logging.getLogger(__name__)

TITLE = "Persian Finance Tracker"
DESCRIPTION = "Offline personal finance tracker with Jalali installment schedules"

# Checked in order; the first matching class decides the status code.
ERROR_STATUS = (
    (InvalidDateError, 422),
    (InvalidScheduleParamsError, 422),
    (BackupFormatError, 422),
    (PlanNotFoundError, 404),
    (PaymentNotFoundError, 404),
    (RecordNotFoundError, 404),
    (PersistenceError, 500),
)


def _status_for(exc: FinanceTrackerError) -> int:
    for error_class, status_code in ERROR_STATUS:
        if isinstance(exc, error_class):
            return status_code
    return 400


async def finance_error_handler(request: fastapi.Request, exc: FinanceTrackerError) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    body = schemas.ErrorResponse(detail=str(exc), error=type(exc).__name__)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app() -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = fastapi.FastAPI(
        title=TITLE,
        description=DESCRIPTION,
        version=settings.API_VERSION,
        debug=settings.DEBUG,
    )

    # Initialize database
    init_db.init_db(app)

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FinanceTrackerError, finance_error_handler)

    # Include routers
    app.include_router(health_check.router)
    app.include_router(installment.router)
    app.include_router(account.router)
    app.include_router(account.sms_router)
    app.include_router(ledger.debts)
    app.include_router(ledger.credits)
    app.include_router(ledger.checks)
    app.include_router(ledger.expenses)
    app.include_router(dashboard.router)
    app.include_router(backup.router)

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        openapi_schema = get_openapi(
            title=TITLE,
            version=settings.API_VERSION,
            description=DESCRIPTION,
            routes=app.routes,
        )
        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app
