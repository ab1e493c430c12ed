"""Pytest fixtures and configuration for the Channel Scout tests.

This module provides:
- In-memory stand-ins for the MongoDB collections and the YouTube client
- Test settings and a FastAPI test client wired to the stand-ins
- Sample YouTube API payload factories
"""

import os

# Settings are cached at import time by the app module; keep startup offline
os.environ.setdefault("MONGODB_INIT_INDEXES", "false")

from collections.abc import Generator
from types import SimpleNamespace
from typing import Any
from unittest.mock import patch

import pytest
from bson.regex import Regex
from fastapi import FastAPI
from fastapi.testclient import TestClient

from channel_scout.api.app import create_app
from channel_scout.api.dependencies import get_db_manager_dep, get_settings_dep
from channel_scout.channel.schemas import SearchPage
from channel_scout.core.config import Settings, get_settings
from channel_scout.core.constants import CHANNEL_STATS_COLLECTION, CHANNELS_COLLECTION
from channel_scout.core.exceptions import UpstreamFetchError

get_settings.cache_clear()


# =============================================================================
# Sample Data
# =============================================================================


def make_channel_item(
    channel_id: str,
    title: str | None = None,
    subscribers: int | str | None = 1000,
    views: int | str | None = 50000,
    videos: int | str | None = 120,
    custom_url: str | None = None,
    country: str | None = "JP",
    hidden: bool = False,
) -> dict[str, Any]:
    """Build a ``channels.list`` item the way the YouTube Data API returns it."""
    statistics: dict[str, Any] = {"hiddenSubscriberCount": hidden}
    if subscribers is not None:
        statistics["subscriberCount"] = str(subscribers)
    if views is not None:
        statistics["viewCount"] = str(views)
    if videos is not None:
        statistics["videoCount"] = str(videos)

    snippet: dict[str, Any] = {
        "title": title if title is not None else f"Channel {channel_id}",
        "description": "",
        "thumbnails": {
            "default": {"url": f"https://yt3.ggpht.com/{channel_id}=s88"},
            "high": {"url": f"https://yt3.ggpht.com/{channel_id}=s800"},
        },
    }
    if custom_url is not None:
        snippet["customUrl"] = custom_url
    if country is not None:
        snippet["country"] = country

    return {
        "kind": "youtube#channel",
        "etag": f"etag-{channel_id}",
        "id": channel_id,
        "snippet": snippet,
        "statistics": statistics,
    }


@pytest.fixture
def channel_item() -> Any:
    """Factory for ``channels.list`` items.

    Returns:
        make_channel_item
    """
    return make_channel_item


# =============================================================================
# In-memory MongoDB
# =============================================================================

_MISSING = object()


def _get_path(document: dict[str, Any], path: str) -> Any:
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches(value: Any, condition: Any) -> bool:
    if not isinstance(condition, dict):
        return value == condition

    for operator, operand in condition.items():
        if operator in ("$gte", "$lte"):
            if value is _MISSING or value is None:
                return False
            if operator == "$gte" and value < operand:
                return False
            if operator == "$lte" and value > operand:
                return False
        elif operator == "$not":
            pattern = operand.try_compile() if isinstance(operand, Regex) else operand
            if isinstance(value, str) and pattern.search(value):
                return False
        else:
            raise NotImplementedError(f"Unsupported operator {operator}")
    return True


class FakeCursor:
    """Aggregation cursor over precomputed results."""

    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        if length is None:
            return list(self._documents)
        return list(self._documents[:length])


class FakeCollection:
    """Dictionary-backed collection keyed by ``channel_id``.

    Supports the ``bulk_write`` upserts and the aggregation stages used by the
    catalog. Set ``fail_with`` to make every call raise, or
    ``skip_title_match`` to ignore ``$match`` stages on ``channel.title``.
    """

    def __init__(self, name: str, database: "FakeDatabase") -> None:
        self.name = name
        self.database = database
        self.documents: dict[str, dict[str, Any]] = {}
        self.bulk_write_calls: list[list[Any]] = []
        self.aggregate_calls: list[list[dict[str, Any]]] = []
        self.fail_with: Exception | None = None
        self.skip_title_match = False

    def insert(self, document: dict[str, Any]) -> None:
        self.documents[document["channel_id"]] = dict(document)

    @property
    def call_count(self) -> int:
        return len(self.bulk_write_calls) + len(self.aggregate_calls)

    async def bulk_write(self, requests: list[Any], ordered: bool = True) -> Any:
        self.bulk_write_calls.append(list(requests))
        if self.fail_with is not None:
            raise self.fail_with

        inserted = modified = 0
        for operation in requests:
            key = operation._filter["channel_id"]
            if key in self.documents:
                modified += 1
            elif operation._upsert:
                inserted += 1
                self.documents[key] = {}
            else:
                continue
            self.documents[key].update(operation._doc["$set"])

        return SimpleNamespace(upserted_count=inserted, modified_count=modified)

    def aggregate(self, pipeline: list[dict[str, Any]]) -> FakeCursor:
        self.aggregate_calls.append(pipeline)
        if self.fail_with is not None:
            raise self.fail_with
        documents = [dict(doc) for doc in self.documents.values()]
        return FakeCursor(self._run(pipeline, documents))

    def _run(
        self, pipeline: list[dict[str, Any]], documents: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        for stage in pipeline:
            ((operator, spec),) = stage.items()
            documents = getattr(self, f"_stage_{operator[1:]}")(spec, documents)
        return documents

    def _stage_match(self, spec: dict[str, Any], documents: list[dict[str, Any]]) -> list:
        if self.skip_title_match and "channel.title" in spec:
            return documents
        return [
            doc
            for doc in documents
            if all(_matches(_get_path(doc, path), cond) for path, cond in spec.items())
        ]

    def _stage_lookup(self, spec: dict[str, Any], documents: list[dict[str, Any]]) -> list:
        foreign = self.database[spec["from"]]
        joined = []
        for doc in documents:
            local = doc.get(spec["localField"])
            matches = [
                dict(other)
                for other in foreign.documents.values()
                if other.get(spec["foreignField"]) == local
            ]
            joined.append({**doc, spec["as"]: matches})
        return joined

    def _stage_unwind(self, spec: str, documents: list[dict[str, Any]]) -> list:
        field = spec.lstrip("$")
        return [{**doc, field: value} for doc in documents for value in doc.get(field, [])]

    def _stage_sort(self, spec: dict[str, int], documents: list[dict[str, Any]]) -> list:
        for key, direction in reversed(list(spec.items())):
            documents = sorted(documents, key=lambda d: d.get(key), reverse=direction < 0)
        return documents


class FakeDatabase(dict):
    """Collections created on first access."""

    def __missing__(self, name: str) -> FakeCollection:
        collection = FakeCollection(name, self)
        self[name] = collection
        return collection


class FakeDatabaseManager:
    """Stand-in for MongoDBManager exposing the two catalog collections."""

    def __init__(self) -> None:
        self.db = FakeDatabase()
        self.channels = self.db[CHANNELS_COLLECTION]
        self.channel_stats = self.db[CHANNEL_STATS_COLLECTION]

    def seed(self, record: Any) -> None:
        """Store a ChannelRecord directly in both collections."""
        self.channels.insert(record.identity_document())
        self.channel_stats.insert(record.stats_document())


@pytest.fixture
def fake_db() -> FakeDatabaseManager:
    """Create empty in-memory catalog collections.

    Returns:
        FakeDatabaseManager instance
    """
    return FakeDatabaseManager()


# =============================================================================
# Fake YouTube Data API
# =============================================================================


class FakeYouTubeSource:
    """Scripted search pages and channel details that records every call.

    Set ``honor_max_results`` to False to return whole pages regardless of
    the requested size.
    """

    def __init__(self) -> None:
        self.pages: dict[str | None, SearchPage] = {}
        self.items: dict[str, dict[str, Any]] = {}
        self.search_calls: list[dict[str, Any]] = []
        self.details_calls: list[list[str]] = []
        self.search_error: UpstreamFetchError | None = None
        self.details_error: UpstreamFetchError | None = None
        self.honor_max_results = True

    def add_pages(self, *pages: list[str]) -> None:
        """Chain search pages with tokens ``page-2``, ``page-3``..."""
        for index, channel_ids in enumerate(pages):
            token = None if index == 0 else f"page-{index + 1}"
            next_token = f"page-{index + 2}" if index + 1 < len(pages) else None
            self.pages[token] = SearchPage(channel_ids=channel_ids, next_page_token=next_token)

    def add_items(self, *items: dict[str, Any]) -> None:
        for item in items:
            self.items[item["id"]] = item

    @property
    def call_count(self) -> int:
        return len(self.search_calls) + len(self.details_calls)

    def search_channels(
        self,
        keyword: str,
        max_results: int,
        region_code: str | None = None,
        relevance_language: str | None = None,
        page_token: str | None = None,
    ) -> SearchPage:
        self.search_calls.append(
            {
                "keyword": keyword,
                "max_results": max_results,
                "region_code": region_code,
                "relevance_language": relevance_language,
                "page_token": page_token,
            }
        )
        if self.search_error is not None:
            raise self.search_error

        page = self.pages.get(page_token, SearchPage())
        channel_ids = page.channel_ids[:max_results] if self.honor_max_results else page.channel_ids
        return SearchPage(
            channel_ids=channel_ids,
            next_page_token=page.next_page_token,
        )

    def channel_details(self, channel_ids: list[str]) -> list[dict[str, Any]]:
        self.details_calls.append(list(channel_ids))
        if self.details_error is not None:
            raise self.details_error
        return [self.items[channel_id] for channel_id in channel_ids if channel_id in self.items]


@pytest.fixture
def youtube_source() -> FakeYouTubeSource:
    """Create a YouTube source with no pages.

    Returns:
        FakeYouTubeSource instance
    """
    return FakeYouTubeSource()


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Create settings for testing.

    Returns:
        Settings with storage and API credentials present
    """
    return Settings(
        mongodb_url="mongodb://catalog-test:27017",
        mongodb_database="channel_scout_test",
        mongodb_init_indexes=False,
        youtube_api_key="test-youtube-key",
        discovery_keyword="ゲーム実況",
        discovery_region="JP",
        discovery_language="ja",
        discovery_result_cap=100,
        discovery_chunk_size=50,
        catalog_page_size=30,
        catalog_max_subscribers=10000,
        catalog_title_exclusion="切り抜き",
    )


@pytest.fixture
def app(
    settings: Settings,
    fake_db: FakeDatabaseManager,
    youtube_source: FakeYouTubeSource,
) -> Generator[FastAPI, None, None]:
    """Create FastAPI application wired to the in-memory stand-ins.

    The YouTube client class is patched so the service still checks for an
    API key before using the fake source.

    Yields:
        FastAPI application instance
    """
    test_app = create_app()
    test_app.dependency_overrides[get_settings_dep] = lambda: settings
    test_app.dependency_overrides[get_db_manager_dep] = lambda: fake_db

    with patch(
        "channel_scout.channel.service.YouTubeDataClient",
        return_value=youtube_source,
    ):
        yield test_app

    test_app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create test client for FastAPI application.

    Args:
        app: FastAPI application

    Yields:
        TestClient instance
    """
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


# =============================================================================
# Test Markers
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers.

    Args:
        config: Pytest configuration
    """
    config.addinivalue_line("markers", "integration: end-to-end tests through the HTTP API")
