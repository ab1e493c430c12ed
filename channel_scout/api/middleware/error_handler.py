"""Error handlers for standardized error responses.

Catalog exceptions are mapped to HTTP status codes:

- ParameterValidationError -> 400
- ConfigurationError       -> 500
- StorageError             -> 500
- UpstreamFetchError       -> 502 (with the upstream status and body)
- anything else            -> 500
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from channel_scout.api.middleware.logging import get_request_id
from channel_scout.api.models.errors import (
    ErrorCodes,
    ErrorResponse,
    InternalServerErrorResponse,
    UpstreamErrorResponse,
    ValidationErrorResponse,
)
from channel_scout.core.exceptions import (
    CatalogError,
    ConfigurationError,
    ParameterValidationError,
    StorageReadError,
    StorageWriteError,
    UpstreamFetchError,
)

logger = logging.getLogger(__name__)


def _log_context(request: Request, request_id: str) -> dict[str, Any]:
    return {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
    }


async def handle_catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
    """Convert a CatalogError into the standard error body."""
    request_id = get_request_id(request)

    error_response: ErrorResponse
    if isinstance(exc, ParameterValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_response = ValidationErrorResponse(
            error_code=ErrorCodes.INVALID_PARAMETER,
            message=exc.message,
            request_id=request_id,
        )
    elif isinstance(exc, UpstreamFetchError):
        status_code = status.HTTP_502_BAD_GATEWAY
        error_response = UpstreamErrorResponse(
            message=exc.message,
            details={"upstream_status": exc.status_code, "upstream_body": exc.body},
            request_id=request_id,
        )
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        if isinstance(exc, ConfigurationError):
            error_code = ErrorCodes.CONFIGURATION_ERROR
        elif isinstance(exc, StorageWriteError):
            error_code = ErrorCodes.STORAGE_WRITE_ERROR
        elif isinstance(exc, StorageReadError):
            error_code = ErrorCodes.STORAGE_READ_ERROR
        else:
            error_code = ErrorCodes.INTERNAL_ERROR
        error_response = InternalServerErrorResponse(
            error_code=error_code,
            message=exc.message,
            request_id=request_id,
        )

    log_level = logging.INFO if status_code < 500 else logging.ERROR
    logger.log(
        log_level,
        "%s: %s",
        type(exc).__name__,
        exc.message,
        extra={**_log_context(request, request_id), "status_code": status_code},
    )

    return JSONResponse(status_code=status_code, content=error_response.model_dump())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI request parsing errors."""
    request_id = get_request_id(request)

    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    error_response = ValidationErrorResponse(
        error_code=ErrorCodes.VALIDATION_ERROR,
        message="Request validation failed",
        details={"errors": errors},
        request_id=request_id,
    )

    logger.info("Validation error", extra=_log_context(request, request_id))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions without leaking internals."""
    request_id = get_request_id(request)

    logger.exception("Unhandled exception", extra=_log_context(request, request_id))

    error_response = InternalServerErrorResponse(
        request_id=request_id,
        details={"error_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(),
    )


def setup_error_handler(app: FastAPI) -> None:
    """Register exception handlers on the application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(CatalogError, handle_catalog_error)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        handle_request_validation_error,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, handle_unexpected_error)
    logger.debug("Error handlers registered")
