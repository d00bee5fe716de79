"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # GOOGLE SHEET
    # ===================
    sheet_id: str = Field(
        ...,
        min_length=1,
        description="Spreadsheet document ID (the /d/<id>/ part of the URL)"
    )
    sheet_gid: str = Field(
        ...,
        min_length=1,
        description="Tab ID inside the spreadsheet (gid=...)"
    )
    header_caption: str = Field(
        default="NOMBRE PRODUCTO",
        min_length=1,
        description="Text that marks the header row in the name column"
    )

    # ===================
    # FEED RETRIEVAL
    # ===================
    feed_strategies: list[str] = Field(
        default=["allorigins", "corsproxy"],
        min_length=1,
        description="Retrieval strategies, tried in this order"
    )
    feed_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        le=120,
        description="Per-request timeout for each strategy"
    )
    preview_length: int = Field(
        default=500,
        ge=0,
        le=10000,
        description="Characters of raw feed text kept for diagnostics"
    )
    max_units_per_size: int = Field(
        default=1000,
        ge=1,
        le=100000,
        description="Upper bound for generated stock units per size"
    )
    refresh_on_startup: bool = Field(
        default=True,
        description="Load the sheet when the application starts"
    )

    # ===================
    # ADMIN ACCESS
    # ===================
    admin_password: Optional[str] = Field(
        None,
        description="Shared secret for admin routes (X-Admin-Key header)"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def admin_configured(self) -> bool:
        """Check if the admin secret is set."""
        return bool(self.admin_password)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
