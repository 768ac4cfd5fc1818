from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from spendtrack.api.middleware.error_handler import (
    handle_generic_error,
    handle_integrity_error,
    handle_spendtrack_error,
    handle_validation_error,
)
from spendtrack.api.middleware.logging import RequestLoggingMiddleware
from spendtrack.api.v1 import router as v1_router
from spendtrack.api.v1.health import router as health_router
from spendtrack.config import settings
from spendtrack.core.exceptions import SpendTrackError
from spendtrack.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_json)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="SpendTrack API",
        description="Expense tracking with rule-based categorization and recurring transactions",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Most specific first.
    app.add_exception_handler(SpendTrackError, handle_spendtrack_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
