"""
Immutable feed configuration passed into the ingestion pipeline.

Built once from Settings so the pipeline never reads ambient globals.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from config.settings import Settings, get_settings

GVIZ_URL_TEMPLATE = (
    "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:json&gid={sheet_gid}"
)


class FeedConfig(BaseModel):
    """Where the inventory sheet lives and how to read it."""
    model_config = ConfigDict(frozen=True)

    sheet_id: str = Field(..., min_length=1)
    sheet_gid: str = Field(..., min_length=1)
    header_caption: str = "NOMBRE PRODUCTO"
    strategies: tuple[str, ...] = ("allorigins", "corsproxy")
    timeout_seconds: float = Field(default=20.0, gt=0)
    preview_length: int = Field(default=500, ge=0)
    max_units_per_size: int = Field(default=1000, ge=1)

    @property
    def feed_url(self) -> str:
        """GViz JSON endpoint for the configured tab."""
        return GVIZ_URL_TEMPLATE.format(sheet_id=self.sheet_id, sheet_gid=self.sheet_gid)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "FeedConfig":
        settings = settings or get_settings()
        return cls(
            sheet_id=settings.sheet_id,
            sheet_gid=settings.sheet_gid,
            header_caption=settings.header_caption,
            strategies=tuple(settings.feed_strategies),
            timeout_seconds=settings.feed_timeout_seconds,
            preview_length=settings.preview_length,
            max_units_per_size=settings.max_units_per_size,
        )
