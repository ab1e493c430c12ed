"""MongoDB connection management for the channel catalog.

The catalog lives in two collections keyed by ``channel_id``:
``channels`` (identity and display fields) and ``channel_stats``
(subscriber, view and video counts).
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, IndexModel

from channel_scout.core.config import Settings, get_settings
from channel_scout.core.constants import CHANNEL_STATS_COLLECTION, CHANNELS_COLLECTION

logger = logging.getLogger(__name__)

SERVER_SELECTION_TIMEOUT_MS = 5000

CATALOG_INDEXES: dict[str, list[IndexModel]] = {
    CHANNELS_COLLECTION: [
        IndexModel([("channel_id", ASCENDING)], unique=True, name="channel_id_unique"),
    ],
    CHANNEL_STATS_COLLECTION: [
        IndexModel([("channel_id", ASCENDING)], unique=True, name="channel_id_unique"),
        IndexModel([("subscriber_count", ASCENDING)], name="subscriber_count"),
    ],
}


class MongoDBManager:
    """Own the motor client and hand out the catalog collections.

    Usage:
        async with MongoDBManager(settings) as db:
            service = ChannelCatalogService(settings, db.channels, db.channel_stats)

    Connecting is lazy; a manager that was never initialized closes as a no-op.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.client: AsyncIOMotorClient | None = None
        self.db: AsyncIOMotorDatabase | None = None
        self.channels: Any | None = None
        self.channel_stats: Any | None = None

    @property
    def is_connected(self) -> bool:
        return self.client is not None

    async def initialize(self) -> None:
        """Create the client and bind the catalog collections.

        Raises:
            ConfigurationError: If no MongoDB URL is configured
        """
        if self.client is not None:
            return

        self.client = AsyncIOMotorClient(
            self.settings.require_mongodb_url(),
            serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS,
        )
        self.db = self.client[self.settings.mongodb_database]
        self.channels = self.db[CHANNELS_COLLECTION]
        self.channel_stats = self.db[CHANNEL_STATS_COLLECTION]
        logger.debug("MongoDB client created for database %s", self.settings.mongodb_database)

    async def close(self) -> None:
        if self.client is None:
            return
        self.client.close()
        self.client = self.db = self.channels = self.channel_stats = None

    async def __aenter__(self) -> "MongoDBManager":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def init_indexes(self) -> None:
        """Create the unique ``channel_id`` keys and the subscriber range index."""
        await self.initialize()
        for name, indexes in CATALOG_INDEXES.items():
            created = await self.db[name].create_indexes(indexes)
            logger.debug("Indexes on %s: %s", name, ", ".join(created))

    async def ping(self) -> bool:
        """Return True when the server answers ``ping``."""
        await self.initialize()
        result = await self.client.admin.command("ping")
        return bool(result.get("ok"))


_db_manager: MongoDBManager | None = None


def get_db_manager() -> MongoDBManager:
    """Return the process-wide manager used by the API."""
    global _db_manager
    if _db_manager is None:
        _db_manager = MongoDBManager()
    return _db_manager


@asynccontextmanager
async def get_db_manager_context(
    settings: Settings | None = None,
) -> AsyncGenerator[MongoDBManager, None]:
    """Yield a short-lived, connected manager (used by the CLI).

    Yields:
        MongoDBManager with the catalog collections bound
    """
    db = MongoDBManager(settings)
    try:
        await db.initialize()
        yield db
    finally:
        await db.close()
