"""
Product schemas: the in-memory inventory model built from the sheet.

Product -> SizeBucket -> StockUnit. Units are fungible placeholders that
only exist so single pieces can be marked as sold locally.
"""

from pydantic import Field, computed_field
from typing import Optional
from enum import Enum

from models.base import BaseSchema, SnapshotSchema


class Audience(str, Enum):
    """Canonical audience categories. Sheet values outside this set are kept as typed."""
    NINO = "niño"
    NINA = "niña"
    UNISEX = "unisex"


class UnitStatus(str, Enum):
    """Status of a single stock unit."""
    AVAILABLE = "available"
    SOLD = "sold"

    def flipped(self) -> "UnitStatus":
        return UnitStatus.SOLD if self is UnitStatus.AVAILABLE else UnitStatus.AVAILABLE


class StockUnit(SnapshotSchema):
    """One fungible piece of stock."""

    id: str = Field(..., min_length=1, description="Synthesized unit ID")
    status: UnitStatus = Field(UnitStatus.AVAILABLE, description="available or sold")


class SizeBucket(SnapshotSchema):
    """
    A size of a product and its units.

    Labels are unique only within their product, and not even then:
    repeated labels in the sheet give repeated buckets.
    """

    size: str = Field(..., min_length=1, description="Size label as written in the sheet")
    units: tuple[StockUnit, ...] = Field(default_factory=tuple)

    @computed_field
    @property
    def available(self) -> int:
        """Units not marked as sold."""
        return sum(1 for u in self.units if u.status == UnitStatus.AVAILABLE)

    @computed_field
    @property
    def total(self) -> int:
        """All units, sold or not."""
        return len(self.units)


class Product(SnapshotSchema):
    """
    Product as read from one sheet row.

    Created fresh on every ingestion cycle.
    """

    id: str = Field(..., min_length=1, description="Sheet ID or synthesized ID")
    name: str = Field(..., min_length=1, description="Display name")
    description: str = Field("", description="Free text description")
    audience: str = Field(
        Audience.UNISEX.value,
        description="niño, niña or unisex (other sheet values kept as typed)"
    )
    image_url: str = Field("", description="Image URL, empty when the row has none")
    price: Optional[str] = Field("", description="Reserved, the sheet has no price column")
    sizes: tuple[SizeBucket, ...] = Field(default_factory=tuple)

    @property
    def unit_ids(self) -> set[str]:
        return {u.id for s in self.sizes for u in s.units}


class ProductListResponse(BaseSchema):
    """Products in the current snapshot."""

    data: list[Product]
    total: int
