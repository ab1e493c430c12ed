"""YouTube Data API v3 client for channel search and details lookups."""

import logging
from typing import Any

import requests

from channel_scout.core.constants import SEARCH_CHUNK_LIMIT, YOUTUBE_API_BASE_URL
from channel_scout.core.exceptions import UpstreamFetchError
from channel_scout.core.http_session import get

from .schemas import SearchPage

logger = logging.getLogger(__name__)

SESSION_NAME = "youtube_data_api"


class YouTubeDataClient:
    """Thin wrapper over ``search.list`` and ``channels.list``.

    Each method issues exactly one request. Non-success responses raise
    UpstreamFetchError carrying the status code and response body; nothing is
    retried here.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = YOUTUBE_API_BASE_URL,
        timeout: int = 30,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def search_channels(
        self,
        keyword: str,
        max_results: int,
        region_code: str | None = None,
        relevance_language: str | None = None,
        page_token: str | None = None,
    ) -> SearchPage:
        """Search channels matching ``keyword``.

        Args:
            keyword: Search query
            max_results: Page size, capped at the API limit
            region_code: ISO 3166-1 alpha-2 region filter
            relevance_language: Language hint for ranking
            page_token: Continuation cursor from a previous page

        Returns:
            SearchPage with channel IDs in ranking order
        """
        params: dict[str, Any] = {
            "part": "id",
            "type": "channel",
            "q": keyword,
            "maxResults": max(1, min(max_results, SEARCH_CHUNK_LIMIT)),
        }
        if region_code:
            params["regionCode"] = region_code
        if relevance_language:
            params["relevanceLanguage"] = relevance_language
        if page_token:
            params["pageToken"] = page_token

        data = self._get("search", params)

        channel_ids = []
        for item in data.get("items", []):
            item_id = item.get("id") or {}
            channel_id = item_id.get("channelId") or (item.get("snippet") or {}).get("channelId")
            if channel_id:
                channel_ids.append(channel_id)

        return SearchPage(
            channel_ids=channel_ids,
            next_page_token=data.get("nextPageToken") or None,
        )

    def channel_details(self, channel_ids: list[str]) -> list[dict[str, Any]]:
        """Fetch snippet and statistics for a batch of channel IDs.

        Args:
            channel_ids: Up to 50 channel IDs

        Returns:
            Raw ``channels.list`` items (deleted channels are simply absent)
        """
        if not channel_ids:
            return []

        params = {
            "part": "snippet,statistics",
            "id": ",".join(channel_ids),
            "maxResults": len(channel_ids),
        }
        data = self._get("channels", params)
        return list(data.get("items", []))

    def _get(self, resource: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/{resource}"
        logger.debug("GET %s %s", url, {k: v for k, v in params.items() if k != "key"})

        try:
            response = get(
                url,
                session_name=SESSION_NAME,
                params={**params, "key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamFetchError(f"YouTube {resource} request failed: {e}") from e

        if not response.ok:
            body = _response_body(response)
            logger.warning("YouTube %s returned %s", resource, response.status_code)
            raise UpstreamFetchError(
                f"YouTube {resource} request failed with status {response.status_code}",
                status_code=response.status_code,
                body=body,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFetchError(
                f"YouTube {resource} returned invalid JSON",
                status_code=response.status_code,
                body=response.text,
            ) from e


def _response_body(response: requests.Response) -> Any:
    """Decoded JSON error body when available, raw text otherwise."""
    try:
        return response.json()
    except ValueError:
        return response.text
