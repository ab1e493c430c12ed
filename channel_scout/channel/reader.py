"""Catalog reader - filtered, paginated reads over the stored channels."""

import logging
import re
from typing import Any

from bson.regex import Regex
from pymongo.errors import PyMongoError

from channel_scout.core.constants import CHANNELS_COLLECTION
from channel_scout.core.exceptions import StorageReadError

from .schemas import CatalogPage, ChannelRecord

logger = logging.getLogger(__name__)


def title_is_excluded(title: str | None, pattern: str) -> bool:
    """Case-insensitive substring check used after retrieval."""
    if not pattern or not title:
        return False
    return pattern.casefold() in title.casefold()


def build_catalog_pipeline(
    min_subscribers: int,
    max_subscribers: int,
    title_exclusion: str = "",
) -> list[dict[str, Any]]:
    """Build the aggregation run against ``channel_stats``.

    Stats rows are range-filtered, inner-joined with ``channels``, filtered by
    title and ordered by ``channel_id``. Windowing and counting happen after
    the in-process title check in ``CatalogReader.read``.
    """
    pipeline: list[dict[str, Any]] = [
        {
            "$match": {
                "subscriber_count": {"$gte": min_subscribers, "$lte": max_subscribers},
            }
        },
        {
            "$lookup": {
                "from": CHANNELS_COLLECTION,
                "localField": "channel_id",
                "foreignField": "channel_id",
                "as": "channel",
            }
        },
        {"$unwind": "$channel"},
    ]

    if title_exclusion:
        pipeline.append(
            {"$match": {"channel.title": {"$not": Regex(re.escape(title_exclusion), "i")}}}
        )

    pipeline.append({"$sort": {"channel_id": 1}})
    return pipeline


class CatalogReader:
    """Serves subscriber-range filtered pages of the catalog."""

    def __init__(self, channel_stats: Any, title_exclusion: str = "") -> None:
        """
        Args:
            channel_stats: Collection holding the statistics projection
            title_exclusion: Substring whose presence in a title hides the channel
        """
        self.channel_stats = channel_stats
        self.title_exclusion = title_exclusion

    async def read(
        self,
        min_subscribers: int,
        max_subscribers: int,
        page: int,
        page_size: int,
        title_exclusion: str | None = None,
    ) -> CatalogPage:
        """Read one page of the filtered catalog.

        Args:
            min_subscribers: Inclusive lower bound
            max_subscribers: Inclusive upper bound
            page: 1-based page number
            page_size: Items per page
            title_exclusion: Overrides the reader's default exclusion substring

        Returns:
            CatalogPage with the window and the filtered total

        Raises:
            StorageReadError: If the query fails
        """
        exclusion = self.title_exclusion if title_exclusion is None else title_exclusion
        offset = (max(1, page) - 1) * page_size
        pipeline = build_catalog_pipeline(min_subscribers, max_subscribers, exclusion)

        try:
            rows = await self.channel_stats.aggregate(pipeline).to_list(length=None)
        except PyMongoError as e:
            logger.error("Catalog query failed: %s", e)
            raise StorageReadError(f"Failed to load channels: {e}") from e

        # Title re-check runs on every row; total and window cover only kept rows
        kept: list[dict[str, Any]] = []
        for row in rows:
            channel = row.get("channel") or {}
            if not (row.get("channel_id") or channel.get("channel_id")):
                continue
            if title_is_excluded(channel.get("title"), exclusion):
                continue
            kept.append(row)

        if len(kept) != len(rows):
            logger.warning(
                "Dropped %d rows that passed the storage filter", len(rows) - len(kept)
            )

        items = [ChannelRecord.from_catalog_row(row) for row in kept[offset : offset + page_size]]
        return CatalogPage(items=items, total=len(kept))
