"""Configuration settings for Channel Scout."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from channel_scout.core.constants import (
    DEFAULT_KEYWORD,
    DEFAULT_LANGUAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_REGION,
    DEFAULT_RESULT_CAP,
    DEFAULT_TITLE_EXCLUSION,
    MAX_ALLOWED_SUBSCRIBERS,
    SEARCH_CHUNK_LIMIT,
    YOUTUBE_API_BASE_URL,
)
from channel_scout.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and config.yaml."""

    model_config = SettingsConfigDict(  # type: ignore[assignment]
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra env vars not defined in model
    )

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "channel_scout"
    mongodb_init_indexes: bool = True

    # YouTube Data API
    youtube_api_key: str = ""
    youtube_api_base_url: str = YOUTUBE_API_BASE_URL
    youtube_api_timeout: int = 30

    # Discovery
    discovery_keyword: str = DEFAULT_KEYWORD
    discovery_region: str = DEFAULT_REGION
    discovery_language: str = DEFAULT_LANGUAGE
    discovery_result_cap: int = DEFAULT_RESULT_CAP
    discovery_chunk_size: int = SEARCH_CHUNK_LIMIT
    discovery_restrict_country: bool = False

    # Catalog
    catalog_page_size: int = DEFAULT_PAGE_SIZE
    catalog_max_subscribers: int = MAX_ALLOWED_SUBSCRIBERS
    catalog_title_exclusion: str = DEFAULT_TITLE_EXCLUSION

    # Logging
    log_level: str = "INFO"

    def require_youtube_api_key(self) -> str:
        """Return the YouTube API key.

        Raises:
            ConfigurationError: If no key is configured
        """
        if not self.youtube_api_key:
            raise ConfigurationError("Server is not configured with YouTube API credentials")
        return self.youtube_api_key

    def require_mongodb_url(self) -> str:
        """Return the MongoDB connection URL.

        Raises:
            ConfigurationError: If no URL is configured
        """
        if not self.mongodb_url:
            raise ConfigurationError("Server is not configured with storage credentials")
        return self.mongodb_url


def load_yaml_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. Defaults to ./config.yaml or ./config.yml

    Returns:
        Dictionary with configuration values
    """
    if config_path is None:
        for path in (Path("config.yaml"), Path("config.yml")):
            if path.exists():
                config_path = path
                break

    if config_path is None or not Path(config_path).exists():
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config file %s: %s", config_path, e)
        return {}


# yaml section -> {yaml key: settings field}
_YAML_FIELDS: dict[str, dict[str, str]] = {
    "discovery": {
        "keyword": "discovery_keyword",
        "region": "discovery_region",
        "language": "discovery_language",
        "result_cap": "discovery_result_cap",
        "chunk_size": "discovery_chunk_size",
        "restrict_country": "discovery_restrict_country",
    },
    "catalog": {
        "page_size": "catalog_page_size",
        "max_subscribers": "catalog_max_subscribers",
        "title_exclusion": "catalog_title_exclusion",
    },
    "youtube_api": {
        "base_url": "youtube_api_base_url",
        "timeout": "youtube_api_timeout",
    },
}


def apply_yaml_config(settings: Settings, config: dict[str, Any]) -> Settings:
    """
    Apply YAML configuration to settings object.

    Environment variables take precedence over YAML config.

    Args:
        settings: Settings object to update
        config: Configuration dictionary from YAML

    Returns:
        Updated Settings object
    """
    overrides: dict[str, Any] = {}
    for section, fields in _YAML_FIELDS.items():
        values = config.get(section) or {}
        for key, field in fields.items():
            if key in values and field not in settings.model_fields_set:
                overrides[field] = values[key]

    if not overrides:
        return settings

    # Re-validate so yaml values get the same coercion as env values
    merged = settings.model_dump()
    merged.update(overrides)
    return Settings.model_validate(merged)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Priority: Environment Variables > YAML Config > Defaults
    """
    return apply_yaml_config(Settings(), load_yaml_config())
