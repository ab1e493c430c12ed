"""Custom exceptions for the channel catalog."""

from typing import Any


class CatalogError(Exception):
    """Base exception for catalog errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParameterValidationError(CatalogError):
    """Query parameter is malformed or out of range."""

    pass


class ConfigurationError(CatalogError):
    """Required configuration (credentials, storage URL) is missing."""

    pass


class UpstreamFetchError(CatalogError):
    """YouTube Data API call returned a non-success response.

    Attributes:
        status_code: HTTP status of the upstream response, None for transport failures
        body: Raw upstream response body, kept for diagnostics
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class StorageError(CatalogError):
    """Storage operation failed."""

    pass


class StorageReadError(StorageError):
    """Catalog query failed."""

    pass


class StorageWriteError(StorageError):
    """Catalog upsert failed."""

    pass
