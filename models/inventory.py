"""
Inventory store and ingestion schemas.
"""

from pydantic import Field
from typing import Any, Optional
from enum import Enum
from datetime import datetime

from models.base import BaseSchema
from models.product import Product, UnitStatus


class IngestionState(str, Enum):
    """Where the last ingestion cycle stands."""
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


class InventoryStatusResponse(BaseSchema):
    """Ingestion status for the presentation layer."""

    state: IngestionState
    error_code: Optional[str] = Field(None, description="FEED_UNREACHABLE, FEED_FORMAT_ERROR, FEED_EMPTY")
    error_message: Optional[str] = None
    product_count: int = Field(0, ge=0)
    local_changes: int = Field(0, ge=0, description="Units toggled since the last refresh")
    last_refreshed_at: Optional[datetime] = None


class PreviewResponse(BaseSchema):
    """First characters of the last raw feed text."""

    preview: Optional[str] = None


class UnitToggleResponse(BaseSchema):
    """
    Result of a unit toggle.

    changed=False means the IDs did not resolve (stale view); not an error.
    """

    changed: bool
    status: Optional[UnitStatus] = None
    product: Optional[Product] = None


class ProductWriteRequest(BaseSchema):
    """
    Loose body accepted by product/size/unit write routes.

    Kept only so the routes have a stable shape; every write is rejected.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    audience: Optional[str] = None
    image_url: Optional[str] = None
    size: Optional[str] = None
    extra: dict[str, Any] = Field(default_factory=dict)


class AdminSessionRequest(BaseSchema):
    """Shared secret check."""

    password: str = Field(..., min_length=1)


class AdminSessionResponse(BaseSchema):
    authorized: bool
