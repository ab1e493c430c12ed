"""Channel discovery - paginates search results and resolves channel details.

A run is modelled as a small state machine:

    PAGINATING -> DETAILS_PENDING -> PAGINATING -> ... -> EXHAUSTED
         \\______________________________________________-> FAILED

PAGINATING fetches one search page and collects unseen candidate IDs.
DETAILS_PENDING resolves those candidates with one batched details call.
EXHAUSTED is reached when the result cap is met or the search has no
continuation cursor. FAILED is entered on any upstream error, which is
then re-raised to the caller.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from channel_scout.core.constants import SEARCH_CHUNK_LIMIT
from channel_scout.core.exceptions import UpstreamFetchError
from channel_scout.core.logging_config import log_discovery_event

from .schemas import ChannelRecord, SearchPage

logger = logging.getLogger(__name__)


class ChannelSource(Protocol):
    """What the discoverer needs from the YouTube client."""

    def search_channels(
        self,
        keyword: str,
        max_results: int,
        region_code: str | None = None,
        relevance_language: str | None = None,
        page_token: str | None = None,
    ) -> SearchPage: ...

    def channel_details(self, channel_ids: list[str]) -> list[dict[str, Any]]: ...


class DiscoveryState(str, Enum):
    """States of a discovery run."""

    PAGINATING = "paginating"
    DETAILS_PENDING = "details_pending"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


@dataclass
class DiscoveryRun:
    """Mutable state of one discovery run."""

    keyword: str
    result_cap: int
    chunk_size: int
    region_code: str | None = None
    relevance_language: str | None = None
    restrict_country: bool = False
    state: DiscoveryState = DiscoveryState.PAGINATING
    records: list[ChannelRecord] = field(default_factory=list)
    seen: set[str] = field(default_factory=set)
    cursor: str | None = None
    next_cursor: str | None = None
    pending: list[str] = field(default_factory=list)
    pages: int = 0
    details_calls: int = 0

    @property
    def remaining(self) -> int:
        return self.result_cap - len(self.records)


class ChannelDiscoverer:
    """Collects up to ``result_cap`` channel records for a keyword."""

    def __init__(self, source: ChannelSource, relevance_language: str | None = None) -> None:
        self.source = source
        self.relevance_language = relevance_language

    def discover(
        self,
        keyword: str,
        result_cap: int,
        chunk_size: int = SEARCH_CHUNK_LIMIT,
        region_code: str | None = None,
        restrict_country: bool = False,
    ) -> list[ChannelRecord]:
        """Run discovery to completion.

        Args:
            keyword: Search keyword
            result_cap: Maximum number of records to return
            chunk_size: Maximum search results per call (clamped to the API limit)
            region_code: Region filter passed to search
            restrict_country: Also drop channels whose country differs from region_code

        Returns:
            Records in search ranking order, unique by ID, at most ``result_cap``

        Raises:
            UpstreamFetchError: If any search or details call fails
        """
        run = self.start(keyword, result_cap, chunk_size, region_code, restrict_country)
        log_discovery_event(logger, keyword, "started")

        while run.state not in (DiscoveryState.EXHAUSTED, DiscoveryState.FAILED):
            self.step(run)

        log_discovery_event(
            logger, keyword, "completed", pages=run.pages, channels_found=len(run.records)
        )
        return run.records[:result_cap]

    def start(
        self,
        keyword: str,
        result_cap: int,
        chunk_size: int = SEARCH_CHUNK_LIMIT,
        region_code: str | None = None,
        restrict_country: bool = False,
    ) -> DiscoveryRun:
        """Create a run in its initial state without issuing any call."""
        run = DiscoveryRun(
            keyword=keyword,
            result_cap=max(0, result_cap),
            chunk_size=max(1, min(chunk_size, SEARCH_CHUNK_LIMIT)),
            region_code=region_code,
            relevance_language=self.relevance_language,
            restrict_country=restrict_country,
        )
        if run.remaining <= 0:
            run.state = DiscoveryState.EXHAUSTED
        return run

    def step(self, run: DiscoveryRun) -> DiscoveryState:
        """Advance ``run`` by one transition and return the new state."""
        try:
            if run.state == DiscoveryState.PAGINATING:
                self._paginate(run)
            elif run.state == DiscoveryState.DETAILS_PENDING:
                self._resolve_details(run)
        except UpstreamFetchError as e:
            run.state = DiscoveryState.FAILED
            log_discovery_event(logger, run.keyword, "failed", pages=run.pages, error=e.message)
            raise

        logger.debug(
            "Discovery %r -> %s (%d records, %d seen)",
            run.keyword,
            run.state.value,
            len(run.records),
            len(run.seen),
        )
        return run.state

    def _paginate(self, run: DiscoveryRun) -> None:
        remaining = run.remaining
        if remaining <= 0:
            run.state = DiscoveryState.EXHAUSTED
            return

        page = self.source.search_channels(
            run.keyword,
            min(run.chunk_size, remaining),
            region_code=run.region_code,
            relevance_language=run.relevance_language,
            page_token=run.cursor,
        )
        run.pages += 1

        candidates: list[str] = []
        for channel_id in page.channel_ids:
            if len(candidates) >= remaining:
                break
            if channel_id in run.seen:
                continue
            run.seen.add(channel_id)
            candidates.append(channel_id)

        run.next_cursor = page.next_page_token

        if not candidates:
            # Whole page was duplicates (or empty): skip the details call
            if run.next_cursor is None:
                run.state = DiscoveryState.EXHAUSTED
            else:
                run.cursor = run.next_cursor
            return

        run.pending = candidates
        run.state = DiscoveryState.DETAILS_PENDING

    def _resolve_details(self, run: DiscoveryRun) -> None:
        items = self.source.channel_details(run.pending)
        run.details_calls += 1

        by_id: dict[str, ChannelRecord] = {}
        for item in items:
            record = ChannelRecord.from_api_item(item)
            by_id[record.id] = record

        for channel_id in run.pending:
            record = by_id.get(channel_id)
            if record is None:
                logger.debug("Channel %s missing from details, dropped", channel_id)
                continue
            if run.restrict_country and run.region_code and record.country != run.region_code:
                continue
            run.records.append(record)

        run.pending = []

        if run.next_cursor is None:
            run.state = DiscoveryState.EXHAUSTED
        else:
            run.cursor = run.next_cursor
            run.state = DiscoveryState.PAGINATING
