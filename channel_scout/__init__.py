"""Channel Scout - discover YouTube channels and serve a filterable catalog."""

from channel_scout.channel import ChannelCatalogService, ChannelRecord

__version__ = "0.2.0"
__all__ = ["ChannelCatalogService", "ChannelRecord"]
