"""
Inventory store: the in-memory snapshot the API serves.

Two layers:
    - snapshot: products from the last successful ingestion (immutable)
    - overrides: unit_id -> status for units toggled locally

Reads merge both. A successful refresh replaces the snapshot and clears
the overrides. Nothing is ever written back to the sheet.
"""

from datetime import datetime, timezone
from typing import Optional
import structlog

from models.inventory import IngestionState, InventoryStatusResponse
from models.product import Audience, Product, UnitStatus
from exceptions import (
    AppError,
    EmptyResultError,
    ProductNotFoundError,
    ReadOnlyInventoryError,
)
from utils.text_utils import fold_text

logger = structlog.get_logger(__name__)

# Filter values that narrow the catalog; anything else lists every product
CANONICAL_AUDIENCES = frozenset(fold_text(a.value) for a in Audience)

# Guidance shown for write actions that belong in the spreadsheet
READ_ONLY_GUIDANCE = {
    "add_product": "add products directly in the Google Sheet.",
    "edit_product": "edit the Google Sheet to change product details.",
    "delete_product": "delete the row in the Google Sheet.",
    "add_size": "add sizes in the Tallas column of the Google Sheet.",
    "rename_size": "rename sizes in the Tallas column of the Google Sheet.",
    "delete_size": "remove sizes from the Tallas column of the Google Sheet.",
    "add_unit": "change the Stock column of the Google Sheet.",
}


class InventoryStore:
    """
    Current inventory snapshot plus ingestion status.

    Single writer: the ingestion cycle calls replace()/mark_*();
    the admin view calls toggle_unit_status(). No locking.
    """

    def __init__(self):
        self._snapshot: tuple[Product, ...] = ()
        self._overrides: dict[str, UnitStatus] = {}
        self.state = IngestionState.IDLE
        self.error_code: Optional[str] = None
        self.error_message: Optional[str] = None
        self.last_refreshed_at: Optional[datetime] = None
        self.preview: Optional[str] = None

    # ===================
    # INGESTION
    # ===================

    def replace(self, products: list[Product], rows_seen: int = 0) -> None:
        """
        Swap in a new snapshot and drop every local override.

        Raises:
            EmptyResultError: If products is empty (old snapshot kept)
        """
        if not products:
            raise EmptyResultError(rows_seen)

        dropped = len(self._overrides)
        self._snapshot = tuple(products)
        self._overrides = {}
        self.state = IngestionState.IDLE
        self.error_code = None
        self.error_message = None
        self.last_refreshed_at = datetime.now(timezone.utc)

        logger.info(
            "inventory_replaced",
            products=len(self._snapshot),
            overrides_dropped=dropped
        )

    def mark_loading(self) -> None:
        self.state = IngestionState.LOADING
        self.error_code = None
        self.error_message = None

    def mark_error(self, error: AppError) -> None:
        """Record a failed cycle. Snapshot and overrides stay as they were."""
        self.state = IngestionState.ERROR
        self.error_code = error.code
        self.error_message = error.message

    def set_preview(self, preview: Optional[str]) -> None:
        self.preview = preview

    # ===================
    # READ OPERATIONS
    # ===================

    def get_products(
        self,
        audience: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Product]:
        """
        Products with local overrides applied.

        Args:
            audience: Keep this audience plus unisex ("all"/None keeps everything; non-canonical values are ignored)
            search: Accent/case-insensitive substring of the product name

        Returns:
            Products in sheet order
        """
        products = [self._with_overrides(p) for p in self._snapshot]

        wanted = fold_text(audience)
        if wanted in CANONICAL_AUDIENCES:
            unisex = fold_text(Audience.UNISEX.value)
            products = [
                p for p in products
                if fold_text(p.audience) in (wanted, unisex)
            ]

        needle = fold_text(search)
        if needle:
            products = [p for p in products if needle in fold_text(p.name)]

        return products

    def get_product(self, product_id: str) -> Product:
        """
        Raises:
            ProductNotFoundError: If no product has this ID
        """
        for product in self._snapshot:
            if product.id == product_id:
                return self._with_overrides(product)
        raise ProductNotFoundError(product_id)

    def get_status(self) -> InventoryStatusResponse:
        return InventoryStatusResponse(
            state=self.state,
            error_code=self.error_code,
            error_message=self.error_message,
            product_count=len(self._snapshot),
            local_changes=len(self._overrides),
            last_refreshed_at=self.last_refreshed_at,
        )

    @property
    def snapshot(self) -> tuple[Product, ...]:
        """Last fetched products, without overrides."""
        return self._snapshot

    # ===================
    # LOCAL MUTATION
    # ===================

    def toggle_unit_status(
        self,
        product_id: str,
        size_index: int,
        unit_id: str,
    ) -> Optional[UnitStatus]:
        """
        Flip one unit between available and sold, locally only.

        Stale or unknown IDs are ignored.

        Returns:
            The unit's new status, or None if nothing matched
        """
        for product in self._snapshot:
            if product.id != product_id or not 0 <= size_index < len(product.sizes):
                continue
            for unit in product.sizes[size_index].units:
                if unit.id != unit_id:
                    continue
                current = self._overrides.get(unit_id, unit.status)
                new_status = current.flipped()
                if new_status == unit.status:
                    del self._overrides[unit_id]
                else:
                    self._overrides[unit_id] = new_status
                logger.info(
                    "unit_toggled",
                    product_id=product_id,
                    size_index=size_index,
                    unit_id=unit_id,
                    status=new_status.value
                )
                return new_status

        logger.debug(
            "unit_toggle_ignored",
            product_id=product_id,
            size_index=size_index,
            unit_id=unit_id
        )
        return None

    def reject_write(self, action: str) -> None:
        """
        Every other write is done in the spreadsheet.

        Raises:
            ReadOnlyInventoryError: Always
        """
        guidance = READ_ONLY_GUIDANCE.get(action, "edit the Google Sheet directly.")
        logger.info("write_rejected", action=action)
        raise ReadOnlyInventoryError(action, guidance)

    def _with_overrides(self, product: Product) -> Product:
        if not self._overrides or product.unit_ids.isdisjoint(self._overrides):
            return product

        sizes = tuple(
            bucket.model_copy(update={
                "units": tuple(
                    unit.model_copy(update={"status": self._overrides[unit.id]})
                    if unit.id in self._overrides else unit
                    for unit in bucket.units
                )
            })
            for bucket in product.sizes
        )
        return product.model_copy(update={"sizes": sizes})


# Singleton instance for convenience
_inventory_store: Optional[InventoryStore] = None

def get_inventory_store() -> InventoryStore:
    """Get or create InventoryStore instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = InventoryStore()
    return _inventory_store
