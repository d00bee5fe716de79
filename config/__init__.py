"""
Configuration module.

Exports:
    settings: Application settings instance
    get_settings: Function to get settings (for dependency injection)
    FeedConfig: Immutable sheet/feed configuration for the ingestion pipeline
"""

from config.settings import settings, get_settings, Settings
from config.feed import FeedConfig

__all__ = [
    # Settings
    "settings",
    "get_settings",
    "Settings",

    # Feed
    "FeedConfig",
]
