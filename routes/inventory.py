"""
Inventory API routes.

Read routes serve the current snapshot. Admin routes refresh it, toggle
single units, export it, and reject every other write (those belong in
the Google Sheet).
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, StreamingResponse
import structlog

from models.product import Product, ProductListResponse
from models.inventory import (
    InventoryStatusResponse,
    PreviewResponse,
    UnitToggleResponse,
    ProductWriteRequest,
)
from services.inventory_service import get_inventory_store
from services.ingestion_service import get_ingestion_service
from services.export_service import get_export_service
from routes.admin import require_admin
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()

admin_only = [Depends(require_admin)]


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# READ ROUTES
# ===================

@router.get("/products", response_model=ProductListResponse)
async def list_products(
    audience: Optional[str] = Query(None, description="all, niño, niña (unisex always included)"),
    search: Optional[str] = Query(None, max_length=100, description="Search in product names")
):
    """
    List products of the current snapshot, local toggles applied.
    """
    try:
        products = get_inventory_store().get_products(audience=audience, search=search)
        return ProductListResponse(data=products, total=len(products))

    except Exception as e:
        return handle_error(e)


@router.get("/status", response_model=InventoryStatusResponse)
async def get_status():
    """Ingestion status: idle, loading or error with its message."""
    return get_inventory_store().get_status()


@router.get("/preview", response_model=PreviewResponse, dependencies=admin_only)
async def get_preview():
    """First characters of the last raw sheet response (debug)."""
    return PreviewResponse(preview=get_inventory_store().preview)


@router.get("/export", dependencies=admin_only)
async def export_stock():
    """Download the current stock, local toggles included, as Excel."""
    try:
        products = get_inventory_store().get_products()
        output = get_export_service().generate_stock_excel(products)
        filename = f"INVENTARIO_{datetime.now().strftime('%Y%m%d_%H%M')}.xlsx"

        return StreamingResponse(
            output,
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'}
        )

    except Exception as e:
        return handle_error(e)


@router.get("/products/{product_id}", response_model=Product)
async def get_product(product_id: str):
    """
    Get a single product by ID.

    Raises:
        404: Product not found
    """
    try:
        return get_inventory_store().get_product(product_id)

    except Exception as e:
        return handle_error(e)


# ===================
# ADMIN ROUTES
# ===================

@router.post("/refresh", response_model=InventoryStatusResponse, dependencies=admin_only)
async def refresh_inventory():
    """
    Reload the sheet. Local toggles are discarded on success.

    Raises:
        503: Sheet unreachable through every strategy
        502: Unexpected response format
        422: No product rows found
        500: Unexpected failure inside the cycle
    """
    try:
        await get_ingestion_service().refresh()
        return get_inventory_store().get_status()

    except Exception as e:
        return handle_error(e)


@router.post(
    "/products/{product_id}/sizes/{size_index}/units/{unit_id}/toggle",
    response_model=UnitToggleResponse,
    dependencies=admin_only
)
async def toggle_unit(product_id: str, size_index: int, unit_id: str):
    """
    Flip one unit between available and sold (local only, not saved to the sheet).

    Unknown IDs answer changed=false.
    """
    try:
        store = get_inventory_store()
        new_status = store.toggle_unit_status(product_id, size_index, unit_id)
        if new_status is None:
            return UnitToggleResponse(changed=False)

        return UnitToggleResponse(
            changed=True,
            status=new_status,
            product=store.get_product(product_id)
        )

    except Exception as e:
        return handle_error(e)


# ===================
# READ-ONLY WRITE ROUTES
# ===================

@router.post("/products", status_code=201, dependencies=admin_only)
async def create_product(data: ProductWriteRequest):
    """Rejected: add products in the Google Sheet."""
    try:
        get_inventory_store().reject_write("add_product")
    except Exception as e:
        return handle_error(e)


@router.patch("/products/{product_id}", dependencies=admin_only)
async def update_product(product_id: str, data: ProductWriteRequest):
    """Rejected: edit the Google Sheet."""
    try:
        get_inventory_store().reject_write("edit_product")
    except Exception as e:
        return handle_error(e)


@router.delete("/products/{product_id}", status_code=204, dependencies=admin_only)
async def delete_product(product_id: str):
    """Rejected: delete the row in the Google Sheet."""
    try:
        get_inventory_store().reject_write("delete_product")
    except Exception as e:
        return handle_error(e)


@router.post("/products/{product_id}/sizes", status_code=201, dependencies=admin_only)
async def add_size(product_id: str, data: ProductWriteRequest):
    """Rejected: sizes come from the Tallas column."""
    try:
        get_inventory_store().reject_write("add_size")
    except Exception as e:
        return handle_error(e)


@router.patch("/products/{product_id}/sizes/{size_index}", dependencies=admin_only)
async def rename_size(product_id: str, size_index: int, data: ProductWriteRequest):
    """Rejected: sizes come from the Tallas column."""
    try:
        get_inventory_store().reject_write("rename_size")
    except Exception as e:
        return handle_error(e)


@router.delete("/products/{product_id}/sizes/{size_index}", status_code=204, dependencies=admin_only)
async def delete_size(product_id: str, size_index: int):
    """Rejected: sizes come from the Tallas column."""
    try:
        get_inventory_store().reject_write("delete_size")
    except Exception as e:
        return handle_error(e)


@router.post("/products/{product_id}/sizes/{size_index}/units", status_code=201, dependencies=admin_only)
async def add_unit(product_id: str, size_index: int):
    """Rejected: unit counts come from the Stock column."""
    try:
        get_inventory_store().reject_write("add_unit")
    except Exception as e:
        return handle_error(e)
