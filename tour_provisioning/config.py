"""Centralized configuration using Pydantic Settings.

This module provides a single source of truth for all configuration:
which store backend to talk to, the conventions used when writing the
tour hierarchy, optional geocoding of new venues and logging.

Configuration can be overridden via environment variables:
- TP_STORE_BACKEND=supabase
- TP_STORE_SUPABASE_URL=https://<project>.supabase.co
- TP_PROVISIONING_ROLLBACK_ON_FAILURE=true
- TP_GEO_ENABLED=true
- etc.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import DEFAULT_TOUR_COLOR


class StoreConfig(BaseSettings):
    """Persistent store configuration.

    Environment variables prefixed with TP_STORE_.
    """

    model_config = SettingsConfigDict(env_prefix="TP_STORE_")

    backend: Literal["memory", "supabase"] = "memory"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None


class ProvisioningConfig(BaseSettings):
    """Conventions applied when provisioning a tour.

    Environment variables prefixed with TP_PROVISIONING_.
    """

    model_config = SettingsConfigDict(env_prefix="TP_PROVISIONING_")

    default_color: str = DEFAULT_TOUR_COLOR
    date_job_title_template: str = "{title} (Tour Date)"
    umbrella_job_type: str = "tour"
    date_job_type: str = "single"
    day_start: str = "00:00:00"
    day_end: str = "23:59:59"
    require_date_per_row: bool = True
    rollback_on_failure: bool = False
    date_order: Literal["YMD", "DMY", "MDY"] = "YMD"


class GeocodingConfig(BaseSettings):
    """Geocoding of newly created locations.

    Environment variables prefixed with TP_GEO_.
    """

    model_config = SettingsConfigDict(env_prefix="TP_GEO_")

    enabled: bool = False
    user_agent: str = "tour-provisioning"
    timeout_seconds: int = 10
    rate_limit_delay: float = 1.0
    max_retries: int = 2
    error_wait_seconds: float = 2.0


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with TP_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="TP_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    Sub-configurations can be accessed via attributes:

        config = get_config()
        print(config.store.backend)
        print(config.provisioning.date_job_title_template)

    Environment variables prefixed with TP_.
    """

    model_config = SettingsConfigDict(env_prefix="TP_")

    store: StoreConfig = Field(default_factory=StoreConfig)
    provisioning: ProvisioningConfig = Field(default_factory=ProvisioningConfig)
    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()


def configure_logging(config: Optional[ObservabilityConfig] = None) -> None:
    """Apply the logging level and format to the root logger."""
    config = config or get_config().observability
    logging.basicConfig(level=config.level.upper(), format=config.format)
