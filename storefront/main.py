"""Storefront API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.customers import router as customers_router
from storefront.api.health import router as health_router
from storefront.api.inventory import router as inventory_router
from storefront.api.middleware import setup_middleware
from storefront.api.products import categories_router
from storefront.api.products import router as products_router
from storefront.domain.exceptions import (
    ContentStoreError,
    ContentStoreTimeoutError,
    StorefrontError,
    UnknownFilterError,
)
from storefront.infrastructure.config import settings
from storefront.infrastructure.content_store import close_content_store, get_content_store
from storefront.infrastructure.logging import configure_logging

configure_logging(settings.log_level)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting Storefront API",
        version=settings.api_version,
        debug=settings.debug,
        content_backend=settings.content_backend,
    )
    get_content_store()

    yield

    logger.info("Shutting down Storefront API")
    await close_content_store()


app = FastAPI(
    title="Storefront API",
    description="Product listing, filtering and search over the storefront content store",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, admin key auth, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)
app.include_router(categories_router)
app.include_router(inventory_router)
app.include_router(customers_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def _error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: list | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or [],
            "request_id": getattr(request.state, "request_id", None),
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return _error_response(request, exc.status_code, error_code, message, details)


@app.exception_handler(ContentStoreError)
async def content_store_exception_handler(
    request: Request, exc: ContentStoreError
) -> JSONResponse:
    """Surface content store failures as gateway errors."""
    logger.error(
        "Content store failure",
        path=request.url.path,
        error=exc.message,
        upstream_status=exc.status_code,
    )
    if isinstance(exc, ContentStoreTimeoutError):
        return _error_response(
            request, status.HTTP_504_GATEWAY_TIMEOUT, "CONTENT_STORE_TIMEOUT", exc.message
        )
    return _error_response(
        request, status.HTTP_502_BAD_GATEWAY, "CONTENT_STORE_ERROR", exc.message
    )


@app.exception_handler(UnknownFilterError)
async def unknown_filter_exception_handler(
    request: Request, exc: UnknownFilterError
) -> JSONResponse:
    """Reject unknown filter keys."""
    return _error_response(
        request, status.HTTP_400_BAD_REQUEST, "UNKNOWN_FILTER", exc.message
    )


@app.exception_handler(StorefrontError)
async def storefront_exception_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Handle remaining storefront errors."""
    logger.error("Storefront error", path=request.url.path, error=exc.message, details=exc.details)
    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "STOREFRONT_ERROR", exc.message
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An internal error occurred",
    )
