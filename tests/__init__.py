"""
Test suite for Sheet Inventory.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_inventory_builder.py -v
"""
