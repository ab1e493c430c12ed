"""Tests for filtered, paginated catalog reads."""

from typing import Any

import pytest
from bson.regex import Regex
from pymongo.errors import ServerSelectionTimeoutError

from channel_scout.channel.reader import CatalogReader, build_catalog_pipeline, title_is_excluded
from channel_scout.channel.schemas import ChannelRecord
from channel_scout.core.exceptions import StorageReadError

EXCLUSION = "切り抜き"


def _seed(fake_db: Any, channel_id: str, subscribers: int | None, title: str = "") -> None:
    record = ChannelRecord(
        id=channel_id,
        title=title or f"Channel {channel_id}",
        subscriber_count=subscribers,
    )
    fake_db.seed(record)


@pytest.fixture
def reader(fake_db: Any) -> CatalogReader:
    return CatalogReader(fake_db.channel_stats, EXCLUSION)


class TestTitleIsExcluded:
    """Test the in-process title check."""

    def test_matches_substring(self) -> None:
        assert title_is_excluded("【切り抜き】名場面集", EXCLUSION)

    def test_case_insensitive(self) -> None:
        assert title_is_excluded("Best CLIPS daily", "clips")

    def test_empty_pattern_or_title(self) -> None:
        assert not title_is_excluded("anything", "")
        assert not title_is_excluded(None, EXCLUSION)


class TestBuildCatalogPipeline:
    """Test the aggregation pipeline shape."""

    def test_stages(self) -> None:
        """Test range match, join, title filter and ordering; no window in storage."""
        pipeline = build_catalog_pipeline(500, 2000, "a.b")

        assert pipeline[0] == {"$match": {"subscriber_count": {"$gte": 500, "$lte": 2000}}}
        assert pipeline[1]["$lookup"]["from"] == "channels"
        assert pipeline[2] == {"$unwind": "$channel"}
        title_filter = pipeline[3]["$match"]["channel.title"]["$not"]
        assert isinstance(title_filter, Regex)
        assert title_filter.pattern == r"a\.b"
        assert pipeline[4:] == [{"$sort": {"channel_id": 1}}]

    def test_no_title_stage_without_exclusion(self) -> None:
        pipeline = build_catalog_pipeline(0, 10)

        assert not any("channel.title" in stage.get("$match", {}) for stage in pipeline)


class TestCatalogReader:
    """Test CatalogReader.read."""

    @pytest.mark.asyncio
    async def test_range_is_inclusive(self, reader: CatalogReader, fake_db: Any) -> None:
        """Test both bounds are inclusive and unknown counts are never listed.

        Given: Channels with 499, 500, 2000, 2001 and unknown subscribers
        When: Reading [500, 2000]
        Then: Only the two boundary channels are returned
        """
        for channel_id, subscribers in [
            ("UCa", 499),
            ("UCb", 500),
            ("UCc", 2000),
            ("UCd", 2001),
            ("UCe", None),
        ]:
            _seed(fake_db, channel_id, subscribers)

        page = await reader.read(500, 2000, page=1, page_size=30)

        assert [item.id for item in page.items] == ["UCb", "UCc"]
        assert page.total == 2

    @pytest.mark.asyncio
    async def test_ordered_by_id_and_paginated(
        self, reader: CatalogReader, fake_db: Any
    ) -> None:
        """Test pages are windows over channel-ID order with a stable total."""
        for i in reversed(range(7)):
            _seed(fake_db, f"UC{i}", 100 + i)

        first = await reader.read(0, 10000, page=1, page_size=3)
        third = await reader.read(0, 10000, page=3, page_size=3)
        beyond = await reader.read(0, 10000, page=4, page_size=3)

        assert [item.id for item in first.items] == ["UC0", "UC1", "UC2"]
        assert [item.id for item in third.items] == ["UC6"]
        assert beyond.items == []
        assert first.total == third.total == beyond.total == 7

    @pytest.mark.asyncio
    async def test_excluded_titles_hidden(self, reader: CatalogReader, fake_db: Any) -> None:
        """Test titles containing the exclusion substring are filtered in storage."""
        _seed(fake_db, "UCa", 100, "ゲーム実況ch")
        _seed(fake_db, "UCb", 100, "【切り抜き】名場面")

        page = await reader.read(0, 10000, page=1, page_size=30)

        assert [item.id for item in page.items] == ["UCa"]
        assert page.total == 1

    @pytest.mark.asyncio
    async def test_recheck_drops_rows_storage_let_through(
        self, reader: CatalogReader, fake_db: Any
    ) -> None:
        """Test the in-process check drops excluded rows and corrects the total.

        Given: Storage ignores the title filter
        When: Reading
        Then: The excluded channel is still dropped and not counted
        """
        fake_db.channel_stats.skip_title_match = True
        _seed(fake_db, "UCa", 100, "Daily CLIPS")
        _seed(fake_db, "UCb", 100, "Gaming")

        page = await reader.read(0, 10000, page=1, page_size=30, title_exclusion="clips")

        assert [item.id for item in page.items] == ["UCb"]
        assert page.total == 1

    @pytest.mark.asyncio
    async def test_recheck_applies_before_pagination(
        self, reader: CatalogReader, fake_db: Any
    ) -> None:
        """Test pages and total are computed over rows kept by the title check.

        Given: Storage ignores the title filter and every other channel is excluded
        When: Reading two pages of size 2
        Then: Pages hold consecutive kept channels and the total counts only them
        """
        fake_db.channel_stats.skip_title_match = True
        for i, title in enumerate(["Gaming", "Daily CLIPS", "Gaming", "Daily CLIPS", "Gaming"]):
            _seed(fake_db, f"UC{i}", 100, f"{title} {i}")

        first = await reader.read(0, 10000, page=1, page_size=2, title_exclusion="clips")
        second = await reader.read(0, 10000, page=2, page_size=2, title_exclusion="clips")

        assert [item.id for item in first.items] == ["UC0", "UC2"]
        assert [item.id for item in second.items] == ["UC4"]
        assert first.total == second.total == 3

    @pytest.mark.asyncio
    async def test_stats_without_identity_not_listed(
        self, reader: CatalogReader, fake_db: Any
    ) -> None:
        """Test the join is inner: statistics without an identity row are skipped."""
        fake_db.channel_stats.insert({"channel_id": "UCorphan", "subscriber_count": 10})
        _seed(fake_db, "UCa", 10)

        page = await reader.read(0, 10000, page=1, page_size=30)

        assert [item.id for item in page.items] == ["UCa"]
        assert page.total == 1

    @pytest.mark.asyncio
    async def test_empty_catalog(self, reader: CatalogReader) -> None:
        page = await reader.read(0, 10000, page=1, page_size=30)

        assert page.items == []
        assert page.total == 0

    @pytest.mark.asyncio
    async def test_storage_failure(self, reader: CatalogReader, fake_db: Any) -> None:
        """Test query failures surface as StorageReadError."""
        fake_db.channel_stats.fail_with = ServerSelectionTimeoutError("no servers")

        with pytest.raises(StorageReadError, match="Failed to load channels"):
            await reader.read(0, 10000, page=1, page_size=30)
