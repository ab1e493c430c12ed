"""FastAPI application factory.

This module creates the FastAPI application with:
- Error handling and request logging middleware
- Channel catalog and health routers
- MongoDB index initialization on startup
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from channel_scout.api.middleware import setup_error_handler, setup_logging_middleware
from channel_scout.api.routers import channels_router, health_router
from channel_scout.core.config import get_settings
from channel_scout.core.constants import (
    API_TAGS,
    API_V1_PREFIX,
    APP_DESCRIPTION,
    APP_NAME,
    APP_VERSION,
)
from channel_scout.core.exceptions import ConfigurationError
from channel_scout.core.http_session import close_all_sessions
from channel_scout.core.logging_config import setup_logging
from channel_scout.database import get_db_manager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Creates MongoDB indexes on startup when enabled and closes the MongoDB
    client and HTTP sessions on shutdown. A missing storage configuration
    does not stop startup; catalog requests report it instead.

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    settings = get_settings()
    db_manager = get_db_manager()
    logger.info("Starting %s v%s", APP_NAME, APP_VERSION)

    if settings.mongodb_init_indexes:
        try:
            await db_manager.init_indexes()
            logger.info("Database indexes initialized")
        except ConfigurationError as e:
            logger.warning("Skipping index creation: %s", e.message)
        except PyMongoError as e:
            logger.error("Index creation failed: %s", e)
            raise

    try:
        yield
    finally:
        logger.info("Shutting down %s", APP_NAME)
        close_all_sessions()
        await db_manager.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=lifespan,
        openapi_tags=API_TAGS,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    setup_logging_middleware(app)
    setup_error_handler(app)

    app.include_router(channels_router, prefix=API_V1_PREFIX)
    app.include_router(health_router)

    logger.debug("Application created")
    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "channel_scout.api.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
