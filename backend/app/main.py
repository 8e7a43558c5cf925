# backend/app/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application (schema + default data on startup)
- Registers global exception handlers
- Registers all routers
- Defines global endpoints (health checks)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.database import SessionLocal, get_db, init_db
from app.middleware import CorrelationIdMiddleware
from app.routers import (
    instruments_router,
    purchases_router,
    goals_router,
    dashboard_router,
    portfolio_router,
)
from app.schemas.errors import ErrorDetail, ValidationErrorDetail
from app.services.bootstrap import bootstrap_defaults
from app.services.exceptions import (
    ServiceError,
    ValidationError,
    InvalidDocumentError,
    PriceUnavailableError,
    NotFoundError,
    ConflictError,
)
from app.utils import setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()


# =============================================================================
# APPLICATION SETUP
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed the sample portfolio into an empty store."""
    init_db()
    with SessionLocal() as db:
        bootstrap_defaults(db)
    logger.info(f"{settings.app_name} started (environment={settings.environment})")
    yield


app = FastAPI(
    title=settings.app_name,
    description="Personal investment portfolio tracker: manual prices, purchases, goals",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE (order matters: last added = first executed)
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Extracts/generates correlation IDs and adds them to response headers
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# These handlers catch service-layer exceptions and convert them to
# consistent HTTP responses. Starlette picks the handler of the most
# specific class in the exception's MRO.
# =============================================================================

@app.exception_handler(InvalidDocumentError)
async def invalid_document_handler(request: Request, exc: InvalidDocumentError) -> JSONResponse:
    """Handle invalid import documents (400)."""
    logger.warning(f"Invalid document: {exc.reason}")
    return JSONResponse(
        status_code=400,
        content=ErrorDetail(
            error="InvalidDocumentError",
            message=str(exc),
            details={"field": exc.field} if exc.field else None,
        ).model_dump(),
    )


@app.exception_handler(PriceUnavailableError)
async def price_unavailable_handler(request: Request, exc: PriceUnavailableError) -> JSONResponse:
    """Handle amount → quantity conversions without a price (400)."""
    logger.warning(f"Price unavailable: {exc.symbol} at {exc.timestamp}")
    return JSONResponse(
        status_code=400,
        content=ErrorDetail(
            error="PriceUnavailableError",
            message=str(exc),
            details={"symbol": exc.symbol, "timestamp": exc.timestamp},
        ).model_dump(),
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle validation errors (400)."""
    logger.warning(f"Validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorDetail(
            error="ValidationError",
            message=str(exc),
            details={"field": exc.field} if exc.field else None,
        ).model_dump(),
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle missing instruments, prices, purchases and goals (404)."""
    logger.warning(f"Not found: {exc}")
    return JSONResponse(
        status_code=404,
        content=ErrorDetail(
            error=type(exc).__name__,
            message=str(exc),
            details={
                "resource_type": exc.resource_type,
                "resource_id": exc.resource_id,
            },
        ).model_dump(),
    )


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    """Handle duplicate instruments (409)."""
    logger.warning(f"Conflict: {exc}")
    return JSONResponse(
        status_code=409,
        content=ErrorDetail(
            error=type(exc).__name__,
            message=str(exc),
            details={"symbol": exc.symbol} if hasattr(exc, "symbol") else None,
        ).model_dump(),
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle generic service errors (500)."""
    logger.error(f"Service error: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorDetail(
            error="ServiceError",
            message=str(exc),
            details=None,
        ).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle all HTTPExceptions with consistent error format.

    Registered on the Starlette base class so unknown routes (404) and
    wrong methods (405) use the same format.

    Converts FastAPI's default {"detail": "..."} format to our standard
    ErrorDetail format for API consistency.
    """
    error_types = {
        400: "BadRequestError",
        404: "NotFoundError",
        405: "MethodNotAllowedError",
        409: "ConflictError",
        422: "ValidationError",
        500: "InternalServerError",
        503: "ServiceUnavailableError",
    }
    error_type = error_types.get(exc.status_code, "HTTPError")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorDetail(
            error=error_type,
            message=str(exc.detail) if exc.detail else "An error occurred",
            details=None,
        ).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors with consistent format.

    Converts the default 422 validation error to our ValidationErrorDetail format.
    """
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    return JSONResponse(
        status_code=422,
        content=ValidationErrorDetail(
            error="ValidationError",
            message="Request validation failed",
            details=errors,
        ).model_dump(),
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(instruments_router)  # /instruments/*
app.include_router(purchases_router)  # /purchases/*
app.include_router(goals_router)  # /goals/*
app.include_router(dashboard_router)  # /dashboard/*
app.include_router(portfolio_router)  # /portfolio/*


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/", tags=["Health"])
def root():
    """
    API root - returns basic application info.
    """
    return {
        "message": f"Welcome to {settings.app_name}!",
        "currency": settings.reporting_currency,
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns HTTP 503 if the database is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "checks": {"database": {"status": "unhealthy", "error": str(e)}},
            },
        )

    return {
        "status": "healthy",
        "checks": {"database": {"status": "healthy"}},
    }


@app.get("/health/live", tags=["Health"])
def liveness_check():
    """
    Liveness probe. Always succeeds while the process is running; does NOT
    check dependencies.
    """
    return {"status": "alive"}
