"""Channel discovery and catalog module."""

from .discovery import ChannelDiscoverer, DiscoveryRun, DiscoveryState
from .query import ChannelQuery
from .reader import CatalogReader
from .schemas import CatalogPage, ChannelRecord, SearchPage
from .service import ChannelCatalogService
from .sync import CatalogSync
from .youtube_client import YouTubeDataClient

__all__ = [
    # Discovery
    "ChannelDiscoverer",
    "DiscoveryRun",
    "DiscoveryState",
    "YouTubeDataClient",
    # Schemas
    "ChannelRecord",
    "SearchPage",
    "CatalogPage",
    "ChannelQuery",
    # Catalog
    "CatalogSync",
    "CatalogReader",
    "ChannelCatalogService",
]
