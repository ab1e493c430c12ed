"""Request logging middleware.

Assigns every request an ``X-Request-ID`` (reusing the caller's one when
present), echoes it on the response and logs completion with timing.
"""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from channel_scout.core.logging_config import log_api_request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request ID propagation and request logging."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        logger.debug(
            "%s %s?%s from %s",
            request.method,
            request.url.path,
            request.url.query,
            request.client.host if request.client else "unknown",
            extra={"request_id": request_id},
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "Request failed after %.1fms",
                duration_ms,
                extra={"request_id": request_id, "path": request.url.path},
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        log_api_request(
            logger,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id=request_id,
        )
        return response


def setup_logging_middleware(app: FastAPI) -> None:
    """Set up logging middleware for the application.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(LoggingMiddleware)


def get_request_id(request: Request) -> str:
    """Get request ID from request state or headers.

    Args:
        request: FastAPI request object

    Returns:
        Request ID string
    """
    return getattr(request.state, "request_id", None) or request.headers.get(
        REQUEST_ID_HEADER,
        str(uuid.uuid4()),
    )
