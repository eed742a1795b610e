"""Error Handlers: global exception handlers for the OrderDesk API.

Invariants:
    - OrderDeskError → structured JSON with error code, message, severity
    - RequestValidationError → 400 with field-level error details
    - OSError escaping the store → 500 STORAGE_ERROR envelope
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Four-layer handler: domain (OrderDeskError), validation (Pydantic),
      storage (OSError), catch-all (Exception)
    - Kept out of main.py so the app module only wires things together
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from orderdesk.core.errors import (
    ErrorContext, ErrorSeverity, OrderDeskError, StorageError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_storage_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(OrderDeskError)
    async def orderdesk_error_handler(request: Request, exc: OrderDeskError):
        """Handle all OrderDesk domain/storage errors."""
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"OrderDeskError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_storage_error_handler(app: FastAPI) -> None:

    @app.exception_handler(OSError)
    async def storage_error_handler(request: Request, exc: OSError):
        """Filesystem failure in the order store: reported, not retried."""
        logger.error(
            f"Storage failure on {request.url.path}: {exc}",
            exc_info=exc,
            extra={"error_code": "STORAGE_ERROR", "path": request.url.path},
        )
        error = StorageError(
            request.method.lower(), ErrorContext(path=request.url.path),
        )
        return JSONResponse(
            status_code=error.http_status, content=error.to_response(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
