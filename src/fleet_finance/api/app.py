"""FastAPI application factory."""

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fleet_finance.api.routes import (
    bill_router,
    calculator_router,
    health_router,
    invoice_router,
    report_router,
)
from fleet_finance.config import get_settings
from fleet_finance.container import get_container, reset_container
from fleet_finance.exceptions import FleetFinanceError
from fleet_finance.logging_config import configure_logging, get_logger, request_context

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging and the container on startup, release them on shutdown."""
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment.value,
    )

    container = get_container()
    logger.info(
        "application_started",
        document_store_enabled=container.settings.document_store_enabled,
    )

    yield

    logger.info("application_stopping")
    reset_container()
    logger.info("application_stopped")


async def log_request_middleware(request: Request, call_next):
    """Tag every event logged during a request with its id, path and method."""
    request_id = str(uuid.uuid4())[:8]
    with request_context(
        request_id=request_id, path=request.url.path, method=request.method
    ):
        response = await call_next(request)
        logger.debug("request_completed", status_code=response.status_code)
    response.headers["X-Request-ID"] = request_id
    return response


async def exception_handler(request: Request, exc: FleetFinanceError) -> JSONResponse:
    """Handle application exceptions and return appropriate JSON responses."""
    logger.warning(
        "application_exception",
        error_code=exc.error_code,
        message=exc.message,
        context=exc.context,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Invoice, bill and vehicle financing calculators for fleet back offices",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.middleware("http")(log_request_middleware)
    app.add_exception_handler(FleetFinanceError, exception_handler)

    app.include_router(health_router)
    app.include_router(calculator_router)
    app.include_router(report_router)
    app.include_router(invoice_router)
    app.include_router(bill_router)

    return app


# Create app instance for uvicorn
app = create_app()
