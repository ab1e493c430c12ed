"""Response models for the channel catalog endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from channel_scout.channel.schemas import ChannelRecord


class ChannelListResponse(BaseModel):
    """One page of the filtered catalog."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "items": [
                    {
                        "id": "UC0123456789abcdefghijk",
                        "title": "Example Channel",
                        "customUrl": "@example",
                        "channelUrl": "https://www.youtube.com/@example",
                        "thumbnailUrl": "https://yt3.ggpht.com/example=s240",
                        "subscriberCount": 1200,
                        "viewCount": 54000,
                        "videoCount": 87,
                    }
                ],
                "page": 1,
                "pageSize": 30,
                "total": 1,
            }
        },
    )

    items: list[ChannelRecord] = Field(default_factory=list)
    page: int = Field(..., ge=1, description="1-based page number")
    page_size: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Number of channels matching the filter")


class ChannelRefreshResponse(ChannelListResponse):
    """Catalog page returned after a refresh."""

    refreshed: int = Field(..., ge=0, description="Number of channels fetched from YouTube")
