"""REST API module for Channel Scout."""

from channel_scout.api.app import app, create_app
from channel_scout.api.routers import channels_router, health_router

__all__ = [
    "app",
    "create_app",
    "channels_router",
    "health_router",
]
