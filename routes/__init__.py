"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.inventory import router as inventory_router
from routes.admin import router as admin_router

__all__ = [
    "inventory_router",
    "admin_router",
]
