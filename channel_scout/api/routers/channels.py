"""Channel catalog endpoints.

This module provides endpoints for:
- Listing stored channels filtered by subscriber count
- Refreshing the catalog from the YouTube Data API
"""

from fastapi import APIRouter, Depends

from channel_scout.api.dependencies import get_catalog_service, get_channel_query
from channel_scout.api.models.errors import ErrorResponse
from channel_scout.api.models.responses import ChannelListResponse, ChannelRefreshResponse
from channel_scout.channel.query import ChannelQuery
from channel_scout.channel.service import ChannelCatalogService

router = APIRouter(prefix="/channels", tags=["channels"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid query parameter"},
    500: {"model": ErrorResponse, "description": "Configuration or storage failure"},
}


@router.get(
    "",
    response_model=ChannelListResponse,
    response_model_exclude_none=True,
    summary="List channels",
    description="""
    List stored channels whose subscriber count lies in
    `[minSubscribers, maxSubscribers]`, ordered by channel ID.

    **Filtering:**
    - `minSubscribers`: default 0, must not exceed the ceiling (10,000)
    - `maxSubscribers`: default and maximum is the ceiling; larger values are clamped

    **Pagination:**
    - `page`: 1-based page number; the page size is fixed per deployment

    Channels without a public subscriber count are not listed.
    """,
    operation_id="list_channels",
    responses=_ERROR_RESPONSES,
)
async def list_channels(
    query: ChannelQuery = Depends(get_channel_query),
    service: ChannelCatalogService = Depends(get_catalog_service),
) -> ChannelListResponse:
    """List one page of the catalog.

    Args:
        query: Validated filter and page parameters
        service: Catalog service dependency

    Returns:
        Channel page with the filtered total
    """
    result = await service.list_channels(query)
    return ChannelListResponse(
        items=result.items,
        page=query.page,
        page_size=query.page_size,
        total=result.total,
    )


@router.post(
    "",
    response_model=ChannelRefreshResponse,
    response_model_exclude_none=True,
    summary="Refresh channels",
    description="""
    Re-run channel discovery against the YouTube Data API, upsert the results,
    then return the requested catalog page.

    Accepts the same query parameters as `GET /channels`. Upstream failures
    return 502 with the YouTube response body in `details.upstream_body`.
    """,
    operation_id="refresh_channels",
    responses={
        **_ERROR_RESPONSES,
        502: {"model": ErrorResponse, "description": "YouTube Data API failure"},
    },
)
async def refresh_channels(
    query: ChannelQuery = Depends(get_channel_query),
    service: ChannelCatalogService = Depends(get_catalog_service),
) -> ChannelRefreshResponse:
    """Refresh the catalog and return one page.

    Args:
        query: Validated filter and page parameters
        service: Catalog service dependency

    Returns:
        Channel page plus the number of channels fetched
    """
    refreshed, result = await service.refresh_channels(query)
    return ChannelRefreshResponse(
        refreshed=refreshed,
        items=result.items,
        page=query.page,
        page_size=query.page_size,
        total=result.total,
    )
