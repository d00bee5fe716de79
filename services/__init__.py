"""
Business logic services.

Each service handles one domain area.
"""

from services.inventory_builder import build_inventory, build_product
from services.inventory_service import InventoryStore, get_inventory_store
from services.ingestion_service import IngestionService, get_ingestion_service
from services.export_service import ExportService, get_export_service

__all__ = [
    "build_inventory",
    "build_product",
    "InventoryStore",
    "get_inventory_store",
    "IngestionService",
    "get_ingestion_service",
    "ExportService",
    "get_export_service",
]
