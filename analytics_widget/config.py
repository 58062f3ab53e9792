"""Centralized configuration management using Pydantic Settings.

This module provides typed settings for the widget runtime, loaded from
environment variables with sensible defaults. The per-item configuration the
host passes to the widget is a different thing; see
``analytics_widget.element.config``.

Usage:
    from analytics_widget.config import get_settings
    settings = get_settings()
    latency = settings.widget.refresh_latency_sec
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WidgetSettings(BaseSettings):
    """Widget behaviour configuration."""

    model_config = SettingsConfigDict(env_prefix="WIDGET_", extra="ignore")

    refresh_latency_ms: int = Field(default=800, ge=0, description="Simulated refresh latency")
    history_days: int = Field(default=7, ge=1, description="Reporting window size in days")
    value_key_prefix: str = Field(default="widget:value:", description="Redis key prefix for stored values")
    use_redis: bool = Field(default=False, description="Persist values in Redis instead of memory")

    @field_validator("use_redis", mode="before")
    @classmethod
    def parse_use_redis(cls, v):
        if isinstance(v, str):
            return v.lower() in ("1", "true", "yes")
        return bool(v)

    @property
    def refresh_latency_sec(self) -> float:
        """Refresh latency as seconds, the unit asyncio.sleep expects."""
        return self.refresh_latency_ms / 1000


class RedisSettings(BaseSettings):
    """Redis connection configuration."""

    model_config = SettingsConfigDict(env_prefix="REDIS_", extra="ignore")

    host: str = Field(default="redis", description="Redis host")
    port: int = Field(default=6379, description="Redis port")
    password: str = Field(default="", description="Redis password")
    db: int = Field(default=0, description="Redis database index")
    socket_timeout: float = Field(default=5.0, description="Socket timeout in seconds")
    socket_connect_timeout: float = Field(default=5.0, description="Socket connect timeout in seconds")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    log_level: str = Field(default="INFO", description="Root log level")
    debug: bool = Field(default=False, alias="widget_debug")

    @field_validator("debug", mode="before")
    @classmethod
    def parse_debug(cls, v):
        if isinstance(v, str):
            return v.lower() in ("1", "true", "yes")
        return bool(v)


class Settings:
    """Main settings combining all configuration sections.

    Each subsetting is loaded independently with its own prefix.
    """

    def __init__(self) -> None:
        self.widget = WidgetSettings()
        self.redis = RedisSettings()
        self.logging = LoggingSettings()


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings instance (singleton pattern)."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear cached settings (useful for testing)."""
    get_settings.cache_clear()
