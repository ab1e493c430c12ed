"""Middleware module for the API.

This module provides:
- Error handling and standardization
- Request ID tracking and request logging
"""

from channel_scout.api.middleware.error_handler import setup_error_handler
from channel_scout.api.middleware.logging import (
    LoggingMiddleware,
    get_request_id,
    setup_logging_middleware,
)

__all__ = [
    "setup_error_handler",
    "LoggingMiddleware",
    "get_request_id",
    "setup_logging_middleware",
]
