"""Health check endpoints."""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from channel_scout.api.dependencies import get_settings_dep
from channel_scout.core.config import Settings
from channel_scout.core.constants import APP_NAME, APP_VERSION, START_TIME
from channel_scout.core.exceptions import ConfigurationError
from channel_scout.database.manager import get_db_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Liveness check",
    description="Returns 200 while the process is up.",
)
async def health_check() -> dict[str, Any]:
    """Liveness endpoint.

    Returns:
        Health status dictionary
    """
    uptime = (datetime.now(timezone.utc) - START_TIME).total_seconds()
    return {"status": "healthy", "version": APP_VERSION, "uptime_seconds": round(uptime, 1)}


@router.get(
    "/health/ready",
    summary="Readiness check",
    description="Checks that MongoDB answers a ping.",
)
async def readiness_check(settings: Settings = Depends(get_settings_dep)) -> JSONResponse:
    """Readiness endpoint.

    Returns:
        200 when storage is reachable, 503 otherwise
    """
    try:
        settings.require_mongodb_url()
        healthy = await get_db_manager().ping()
        detail = "ok" if healthy else "ping failed"
    except (ConfigurationError, PyMongoError) as e:
        logger.warning("Readiness check failed: %s", e)
        healthy, detail = False, str(e)

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ready" if healthy else "unavailable", "mongodb": detail},
    )


@router.get(
    "/",
    summary="API info",
    description="Get basic API information.",
)
async def root() -> dict[str, str]:
    """Root endpoint.

    Returns:
        API information
    """
    return {"name": APP_NAME, "version": APP_VERSION, "docs": "/docs"}
