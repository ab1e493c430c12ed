"""Core configuration, constants, exceptions and logging."""

from channel_scout.core.config import Settings, get_settings
from channel_scout.core.exceptions import (
    CatalogError,
    ConfigurationError,
    ParameterValidationError,
    StorageError,
    StorageReadError,
    StorageWriteError,
    UpstreamFetchError,
)

__all__ = [
    "Settings",
    "get_settings",
    "CatalogError",
    "ConfigurationError",
    "ParameterValidationError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "UpstreamFetchError",
]
