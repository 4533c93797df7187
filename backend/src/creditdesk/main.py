"""FastAPI application entry point."""
import traceback
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from sqlalchemy.exc import SQLAlchemyError

from creditdesk.api.v1 import bundles, business, credits, customers, health, reports, subscriptions, vendors
from creditdesk.api.v1 import settings as settings_api
from creditdesk.config import APP_VERSION, settings
from creditdesk.database import AsyncSessionLocal, init_db
from creditdesk.middleware.logging import LoggingMiddleware, setup_logging
from creditdesk.middleware.metrics import MetricsMiddleware
from creditdesk.schemas.error import REMEDIATION_HINTS, ErrorCode, ErrorDetail, ErrorResponse
from creditdesk.services.settings_service import SettingsService
from creditdesk.state import AppState

# Setup structured logging
setup_logging()
logger = structlog.get_logger(__name__)

API_PREFIX = "/api"

# Pydantic v2 error types mapped to our error codes
VALIDATION_CODES = {
    "missing": ErrorCode.MISSING_REQUIRED_FIELD,
    "value_error": ErrorCode.VALIDATION_ERROR,
    "greater_than": ErrorCode.INVALID_AMOUNT,
    "greater_than_equal": ErrorCode.INVALID_AMOUNT,
    "float_parsing": ErrorCode.INVALID_AMOUNT,
    "int_parsing": ErrorCode.INVALID_AMOUNT,
    "date_from_datetime_parsing": ErrorCode.INVALID_DATE,
    "date_parsing": ErrorCode.INVALID_DATE,
    "enum": ErrorCode.INVALID_ENUM_VALUE,
}


def request_id_for(request: Request) -> str:
    """Request ID from the X-Request-ID header, or a fresh one."""
    return request.headers.get("x-request-id", f"req_{uuid.uuid4().hex[:12]}")


def error_code_for(error: dict) -> str:
    """Pick an error code for one pydantic error entry."""
    location = [str(part) for part in error.get("loc", ())]
    if "email" in location:
        return ErrorCode.INVALID_EMAIL
    if "mac_address" in location:
        return ErrorCode.INVALID_MAC_ADDRESS
    return VALIDATION_CODES.get(error["type"], ErrorCode.VALIDATION_ERROR)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the schema and seed default settings before serving requests."""
    logger.info("application_starting", env=settings.app_env, database_url=settings.database_url)
    await init_db()
    async with AsyncSessionLocal() as session:
        await SettingsService(session).seed_defaults()
        await session.commit()
    yield
    logger.info("application_shutting_down")


# Create FastAPI application
app = FastAPI(
    title="IT Services Credit Management",
    description="Customers, vendor credit balances, subscriptions and profit/loss for an IT services reseller",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    responses={
        422: {"model": ErrorResponse, "description": "Request validation failed"},
        503: {"model": ErrorResponse, "description": "Database error, operation rolled back"},
    },
)

# List cache shared by the routers
app.state.cache = AppState()

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(MetricsMiddleware)
app.add_middleware(LoggingMiddleware)

# Mount Prometheus metrics endpoint
app.mount("/metrics", make_asgi_app())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request validation errors with a structured response.

    Returns 422 with field-level details. Nothing has been written at this point.
    """
    request_id = request_id_for(request)

    details = []
    for error in exc.errors():
        code = error_code_for(error)
        details.append(
            ErrorDetail(
                code=code,
                message=error["msg"],
                field=".".join(str(loc) for loc in error["loc"]),
                value=error.get("input"),
            ).model_dump(mode="json")
        )

    logger.warning(
        "validation_error",
        path=request.url.path,
        method=request.method,
        request_id=request_id,
        error_count=len(details),
    )

    remediation = next(
        (REMEDIATION_HINTS[d["code"]] for d in details if d["code"] in REMEDIATION_HINTS),
        "Check the API documentation for correct request format at /docs",
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "details": details,
            "remediation": remediation,
            "request_id": request_id,
            "timestamp": datetime.utcnow().isoformat() + "Z",
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Handle storage errors.

    The unit of work has already been rolled back; returns 503 with the
    underlying message outside production.
    """
    request_id = request_id_for(request)

    logger.error(
        "database_error",
        path=request.url.path,
        method=request.method,
        request_id=request_id,
        error_type=type(exc).__name__,
        error_message=str(exc),
    )

    error_message = "Database temporarily unavailable" if settings.app_env == "production" else str(exc)

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "DatabaseError",
            "message": "A database error occurred",
            "details": [{"code": ErrorCode.DATABASE_ERROR, "message": error_message}],
            "remediation": REMEDIATION_HINTS.get(ErrorCode.DATABASE_ERROR),
            "request_id": request_id,
            "timestamp": datetime.utcnow().isoformat() + "Z",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all other uncaught exceptions.

    Logs the stack trace and returns 500 with the request ID.
    """
    request_id = request_id_for(request)

    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        request_id=request_id,
        exception_type=type(exc).__name__,
        exception_message=str(exc),
        stack_trace=traceback.format_exc(),
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred",
            "details": [
                {
                    "code": ErrorCode.INTERNAL_ERROR,
                    "message": str(exc) if settings.debug else "Internal server error",
                }
            ],
            "remediation": "Check the server log for this request ID",
            "request_id": request_id,
            "timestamp": datetime.utcnow().isoformat() + "Z",
        },
    )


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": "IT Services Credit Management",
        "version": APP_VERSION,
        "status": "operational",
        "docs": "/docs",
    }


# Include routers
app.include_router(health.router, prefix=API_PREFIX)
app.include_router(customers.router, prefix=API_PREFIX)
app.include_router(vendors.router, prefix=API_PREFIX)
app.include_router(subscriptions.router, prefix=API_PREFIX)
app.include_router(bundles.router, prefix=API_PREFIX)
app.include_router(credits.router, prefix=API_PREFIX)
app.include_router(business.router, prefix=API_PREFIX)
app.include_router(reports.router, prefix=API_PREFIX)
app.include_router(settings_api.router, prefix=API_PREFIX)
