"""
Configuration package
Environment-driven settings for Redis connectivity and store defaults
"""

from .settings import Settings, get_settings, reload_settings

__all__ = [
    "Settings",
    "get_settings",
    "reload_settings"
]
