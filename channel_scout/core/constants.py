"""Application constants and metadata.

This module centralizes all application-wide constants for:
- Application metadata
- Catalog limits
- YouTube Data API endpoints and limits
"""

from datetime import datetime, timezone

# Application start time (for uptime calculation)
START_TIME = datetime.now(timezone.utc)

# =============================================================================
# Application Metadata
# =============================================================================

APP_NAME = "Channel Scout API"
APP_DESCRIPTION = """
Discovers YouTube channels for a keyword and serves a filterable catalog.

## Features

- **Catalog listing**: Page through stored channels filtered by subscriber count
- **Refresh**: Re-run discovery against the YouTube Data API and upsert results
"""
APP_VERSION = "0.2.0"

API_V1_PREFIX = "/api/v1"

# =============================================================================
# Catalog Configuration
# =============================================================================

MAX_ALLOWED_SUBSCRIBERS = 10_000
DEFAULT_PAGE_SIZE = 30
DEFAULT_TITLE_EXCLUSION = "切り抜き"

CHANNELS_COLLECTION = "channels"
CHANNEL_STATS_COLLECTION = "channel_stats"

# =============================================================================
# YouTube Data API
# =============================================================================

YOUTUBE_API_BASE_URL = "https://www.googleapis.com/youtube/v3"

# search.list and channels.list both cap a single call at 50 results
SEARCH_CHUNK_LIMIT = 50

DEFAULT_RESULT_CAP = 100
DEFAULT_KEYWORD = "ゲーム実況"
DEFAULT_REGION = "JP"
DEFAULT_LANGUAGE = "ja"

THUMBNAIL_PREFERENCE = ("high", "medium", "default")

API_TAGS = [
    {
        "name": "channels",
        "description": "Channel catalog endpoints. List stored channels or refresh them from YouTube.",
    },
    {
        "name": "health",
        "description": "Health check endpoints.",
    },
]
