"""API request/response models."""

from channel_scout.api.models.errors import (
    ErrorCodes,
    ErrorResponse,
    InternalServerErrorResponse,
    UpstreamErrorResponse,
    ValidationErrorResponse,
)
from channel_scout.api.models.responses import ChannelListResponse, ChannelRefreshResponse

__all__ = [
    "ErrorCodes",
    "ErrorResponse",
    "InternalServerErrorResponse",
    "UpstreamErrorResponse",
    "ValidationErrorResponse",
    "ChannelListResponse",
    "ChannelRefreshResponse",
]
