"""Pydantic schemas for the channel catalog."""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from channel_scout.core.constants import THUMBNAIL_PREFERENCE


def parse_count(value: Any) -> int | None:
    """Coerce a YouTube statistics value to a non-negative int.

    The API sends counts as decimal strings. Anything missing, non-numeric or
    negative becomes None; zero is only returned for an explicit zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if not math.isfinite(value) or value < 0:
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text.isdecimal():
            return None
        return int(text)
    return None


def pick_thumbnail(thumbnails: dict[str, Any] | None) -> str | None:
    """Return the best available thumbnail URL (high, then medium, then default)."""
    if not thumbnails:
        return None
    for key in THUMBNAIL_PREFERENCE:
        thumb = thumbnails.get(key)
        if isinstance(thumb, dict) and thumb.get("url"):
            return thumb["url"]
    return None


def build_channel_url(channel_id: str, custom_url: str | None) -> str:
    """Build a public channel URL from the vanity handle or the channel ID."""
    if custom_url:
        if custom_url.lower().startswith(("http://", "https://")):
            return custom_url
        if custom_url.startswith("@"):
            return f"https://www.youtube.com/{custom_url}"
        return f"https://www.youtube.com/c/{custom_url}"
    return f"https://www.youtube.com/channel/{channel_id}"


class ChannelRecord(BaseModel):
    """A discovered YouTube channel with its latest statistics.

    Serialises with camelCase keys (``customUrl``, ``subscriberCount``...)
    to match the HTTP contract.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    custom_url: str | None = None
    thumbnail_url: str | None = None
    country: str | None = None
    subscriber_count: int | None = Field(default=None, ge=0)
    view_count: int | None = Field(default=None, ge=0)
    video_count: int | None = Field(default=None, ge=0)
    etag: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def channel_url(self) -> str:
        """Public URL of the channel."""
        return build_channel_url(self.id, self.custom_url)

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> "ChannelRecord":
        """Build a record from a ``channels.list`` item.

        Args:
            item: Raw item with ``id``, ``snippet``, ``statistics`` and ``etag``

        Returns:
            ChannelRecord
        """
        channel_id = item["id"]
        snippet = item.get("snippet") or {}
        statistics = item.get("statistics") or {}

        if statistics.get("hiddenSubscriberCount"):
            subscriber_count = None
        else:
            subscriber_count = parse_count(statistics.get("subscriberCount"))

        return cls(
            id=channel_id,
            title=snippet.get("title") or channel_id,
            custom_url=snippet.get("customUrl") or None,
            thumbnail_url=pick_thumbnail(snippet.get("thumbnails")),
            country=snippet.get("country") or None,
            subscriber_count=subscriber_count,
            view_count=parse_count(statistics.get("viewCount")),
            video_count=parse_count(statistics.get("videoCount")),
            etag=item.get("etag") or None,
        )

    @classmethod
    def from_catalog_row(cls, row: dict[str, Any]) -> "ChannelRecord":
        """Build a record from a joined ``channel_stats`` + ``channels`` row."""
        channel = row.get("channel") or {}
        channel_id = row.get("channel_id") or channel["channel_id"]
        return cls(
            id=channel_id,
            title=channel.get("title") or channel_id,
            custom_url=channel.get("custom_url"),
            thumbnail_url=channel.get("thumbnail_url"),
            country=channel.get("country"),
            subscriber_count=row.get("subscriber_count"),
            view_count=row.get("view_count"),
            video_count=row.get("video_count"),
            etag=channel.get("etag"),
        )

    def identity_document(self) -> dict[str, Any]:
        """Identity/display projection stored in the ``channels`` collection."""
        return {
            "channel_id": self.id,
            "title": self.title,
            "custom_url": self.custom_url,
            "thumbnail_url": self.thumbnail_url,
            "country": self.country,
            "etag": self.etag,
        }

    def stats_document(self) -> dict[str, Any]:
        """Statistics projection stored in the ``channel_stats`` collection."""
        return {
            "channel_id": self.id,
            "subscriber_count": self.subscriber_count,
            "view_count": self.view_count,
            "video_count": self.video_count,
        }


class SearchPage(BaseModel):
    """One page of ``search.list`` results reduced to channel IDs."""

    channel_ids: list[str] = Field(default_factory=list)
    next_page_token: str | None = None


class CatalogPage(BaseModel):
    """A window of the filtered catalog plus the filtered total."""

    items: list[ChannelRecord] = Field(default_factory=list)
    total: int = 0
