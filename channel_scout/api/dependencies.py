"""FastAPI dependencies for the API module."""

from fastapi import Depends, Query

from channel_scout.channel.query import ChannelQuery
from channel_scout.channel.service import ChannelCatalogService
from channel_scout.core.config import Settings, get_settings
from channel_scout.database.manager import MongoDBManager, get_db_manager


def get_settings_dep() -> Settings:
    """Dependency to get application settings.

    Returns:
        Settings: Application settings instance
    """
    return get_settings()


async def get_db_manager_dep(settings: Settings = Depends(get_settings_dep)) -> MongoDBManager:
    """Dependency to get the database manager.

    Raises:
        ConfigurationError: If storage is not configured

    Returns:
        MongoDBManager: Initialized database manager instance
    """
    settings.require_mongodb_url()
    db_manager = get_db_manager()
    await db_manager.initialize()
    return db_manager


def get_channel_query(
    min_subscribers: str | None = Query(
        default=None,
        alias="minSubscribers",
        description="Inclusive lower subscriber bound (default 0)",
    ),
    max_subscribers: str | None = Query(
        default=None,
        alias="maxSubscribers",
        description="Inclusive upper subscriber bound; values above the ceiling are clamped",
    ),
    page: str | None = Query(
        default=None,
        description="1-based page number (default 1)",
    ),
    settings: Settings = Depends(get_settings_dep),
) -> ChannelQuery:
    """Dependency that validates the catalog query string.

    Raises:
        ParameterValidationError: If a parameter is invalid or out of range
    """
    return ChannelQuery.from_params(
        min_subscribers,
        max_subscribers,
        page,
        page_size=settings.catalog_page_size,
        ceiling=settings.catalog_max_subscribers,
    )


async def get_catalog_service(
    settings: Settings = Depends(get_settings_dep),
    db_manager: MongoDBManager = Depends(get_db_manager_dep),
) -> ChannelCatalogService:
    """Dependency to get the catalog service bound to the MongoDB collections."""
    return ChannelCatalogService(settings, db_manager.channels, db_manager.channel_stats)
