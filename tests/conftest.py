"""
Shared test fixtures.
"""

import os
import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

# Settings are read at import time; give them test values first
os.environ.setdefault("SHEET_ID", "test-sheet-id")
os.environ.setdefault("SHEET_GID", "123")
os.environ.setdefault("ADMIN_PASSWORD", "test-admin")
os.environ.setdefault("REFRESH_ON_STARTUP", "false")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from unittest.mock import patch

from config.feed import FeedConfig
from services.inventory_service import InventoryStore
from tests.factories import GvizFactory, HEADER_ROW, ProductFactory


ADMIN_HEADERS = {"X-Admin-Key": "test-admin"}


# ===================
# FIXTURES
# ===================

@pytest.fixture
def feed_config() -> FeedConfig:
    """Feed config pointing at a fake sheet."""
    return FeedConfig(
        sheet_id="test-sheet-id",
        sheet_gid="123",
        strategies=("allorigins", "corsproxy"),
        preview_length=500,
        max_units_per_size=1000,
    )


@pytest.fixture
def store() -> InventoryStore:
    """Empty inventory store."""
    return InventoryStore()


@pytest.fixture
def sample_rows() -> list[list]:
    """Sheet rows: header, two products, one decorative blank row."""
    return [
        HEADER_ROW,
        ["p1", "Vestido Flores", "Algodón", "Niña", "https://example.com/v.jpg", "2, 4/6", 3.0],
        [None, "Camisa Lino", "", "niño", None, "S", "1.9"],
        [None, None, None, None, None, None, None],
    ]


@pytest.fixture
def sample_gviz_text(sample_rows) -> str:
    """Raw GViz response for sample_rows."""
    return GvizFactory.response(sample_rows)


@pytest.fixture
def loaded_store(store) -> InventoryStore:
    """Store holding three products with predictable unit IDs."""
    store.replace([
        ProductFactory.create(id="nina-1", name="Vestido Niña", audience="niña", sizes={"2": 2, "4": 1}),
        ProductFactory.create(id="nino-1", name="Camisa Niño", audience="niño", sizes={"S": 1}),
        ProductFactory.create(id="uni-1", name="Gorro Algodón", audience="unisex", sizes={"U": 3}),
    ])
    return store


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client(loaded_store):
    """
    FastAPI test client wired to loaded_store.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/api/inventory/products")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    with patch("routes.inventory.get_inventory_store", return_value=loaded_store):
        yield TestClient(app)
