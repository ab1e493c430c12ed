"""Catalog service - wires discovery, sync and reads together."""

import asyncio
import logging
from typing import Any

from channel_scout.core.config import Settings

from .discovery import ChannelDiscoverer, ChannelSource
from .query import ChannelQuery
from .reader import CatalogReader
from .schemas import CatalogPage
from .sync import CatalogSync
from .youtube_client import YouTubeDataClient

logger = logging.getLogger(__name__)


class ChannelCatalogService:
    """Runs the read-only and refresh pipelines for one request.

    Stages run strictly in sequence: fetch, then sync, then read.
    """

    def __init__(
        self,
        settings: Settings,
        channels: Any,
        channel_stats: Any,
        source: ChannelSource | None = None,
    ) -> None:
        """
        Args:
            settings: Application settings
            channels: Collection for the identity projection
            channel_stats: Collection for the statistics projection
            source: YouTube client; built from settings on first refresh if omitted
        """
        self.settings = settings
        self.sync = CatalogSync(channels, channel_stats)
        self.reader = CatalogReader(channel_stats, settings.catalog_title_exclusion)
        self._source = source

    @property
    def source(self) -> ChannelSource:
        """YouTube client.

        Raises:
            ConfigurationError: If no API key is configured
        """
        if self._source is None:
            self._source = YouTubeDataClient(
                api_key=self.settings.require_youtube_api_key(),
                base_url=self.settings.youtube_api_base_url,
                timeout=self.settings.youtube_api_timeout,
            )
        return self._source

    async def list_channels(self, query: ChannelQuery) -> CatalogPage:
        """Read one page of the catalog."""
        return await self.reader.read(
            query.min_subscribers,
            query.max_subscribers,
            query.page,
            query.page_size,
        )

    async def refresh_channels(self, query: ChannelQuery) -> tuple[int, CatalogPage]:
        """Rediscover channels, upsert them, then read one page.

        Returns:
            Tuple of (number of channels fetched, catalog page)

        Raises:
            ConfigurationError: If no API key is configured
            UpstreamFetchError: If a YouTube call fails
            StorageError: If the upsert or the read fails
        """
        discoverer = ChannelDiscoverer(self.source, self.settings.discovery_language)

        # The HTTP client blocks; keep the event loop free while it runs
        loop = asyncio.get_running_loop()
        records = await loop.run_in_executor(
            None,
            lambda: discoverer.discover(
                self.settings.discovery_keyword,
                self.settings.discovery_result_cap,
                self.settings.discovery_chunk_size,
                self.settings.discovery_region,
                self.settings.discovery_restrict_country,
            ),
        )

        await self.sync.sync(records)
        page = await self.list_channels(query)

        logger.info(
            "Refreshed %d channels, page %d has %d items",
            len(records),
            query.page,
            len(page.items),
        )
        return len(records), page
