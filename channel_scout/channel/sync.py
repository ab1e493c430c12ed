"""Catalog sync - upserts discovered channels into MongoDB."""

import logging
from typing import Any

from pymongo import UpdateOne
from pymongo.errors import PyMongoError

from channel_scout.core.exceptions import StorageWriteError

from .schemas import ChannelRecord

logger = logging.getLogger(__name__)


class CatalogSync:
    """Writes channel records as two projections keyed by ``channel_id``.

    ``channels`` holds identity/display fields and ``channel_stats`` holds the
    statistics. Each projection is written with one ordered bulk upsert. The
    two writes are not wrapped in a transaction: if the statistics write fails
    after the identity write succeeded, the identity rows stay.
    """

    def __init__(self, channels: Any, channel_stats: Any) -> None:
        """
        Args:
            channels: Collection for the identity projection
            channel_stats: Collection for the statistics projection
        """
        self.channels = channels
        self.channel_stats = channel_stats

    async def sync(self, records: list[ChannelRecord]) -> int:
        """Upsert ``records`` (last write wins per channel).

        Args:
            records: Records to store

        Returns:
            Number of distinct channels synced

        Raises:
            StorageWriteError: If either projection's upsert fails
        """
        # Later duplicates overwrite earlier ones, matching upsert order
        latest: dict[str, ChannelRecord] = {}
        for record in records:
            latest[record.id] = record

        if not latest:
            return 0

        await self._upsert(
            self.channels,
            [record.identity_document() for record in latest.values()],
            "channels",
        )
        await self._upsert(
            self.channel_stats,
            [record.stats_document() for record in latest.values()],
            "channel_stats",
        )

        logger.info("Synced %d channels", len(latest))
        return len(latest)

    async def _upsert(self, collection: Any, documents: list[dict[str, Any]], label: str) -> None:
        if not documents:
            return

        operations = [
            UpdateOne({"channel_id": doc["channel_id"]}, {"$set": doc}, upsert=True)
            for doc in documents
        ]
        try:
            result = await collection.bulk_write(operations, ordered=True)
        except PyMongoError as e:
            logger.error("Upsert into %s failed: %s", label, e)
            raise StorageWriteError(f"Failed to upsert {label}: {e}") from e

        logger.debug(
            "Upserted %s: %s inserted, %s modified",
            label,
            getattr(result, "upserted_count", "?"),
            getattr(result, "modified_count", "?"),
        )
