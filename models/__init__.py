"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    SnapshotSchema,
)
from models.product import (
    Audience,
    UnitStatus,
    StockUnit,
    SizeBucket,
    Product,
    ProductListResponse,
)
from models.inventory import (
    IngestionState,
    InventoryStatusResponse,
    PreviewResponse,
    UnitToggleResponse,
    ProductWriteRequest,
    AdminSessionRequest,
    AdminSessionResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "SnapshotSchema",

    # Product
    "Audience",
    "UnitStatus",
    "StockUnit",
    "SizeBucket",
    "Product",
    "ProductListResponse",

    # Inventory
    "IngestionState",
    "InventoryStatusResponse",
    "PreviewResponse",
    "UnitToggleResponse",
    "ProductWriteRequest",
    "AdminSessionRequest",
    "AdminSessionResponse",
]
