"""Shared utilities for job infrastructure."""

from arq.connections import RedisSettings

from gatekeeper.config import Settings, settings


def get_redis_settings(app_settings: Settings | None = None) -> RedisSettings:
    """Get Redis settings for ARQ from app configuration.

    Args:
        app_settings: Settings to read ``redis_url`` from, defaults to the
            process settings

    Returns:
        ARQ RedisSettings instance
    """
    app_settings = app_settings or settings
    return RedisSettings.from_dsn(str(app_settings.redis_url))
