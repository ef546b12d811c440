"""
PATH: inventory/models/__init__.py

Inventory models export surface.
"""

from .stock_entry import StockEntry
from .stock_item import StockItem, StockType

__all__ = [
    "StockEntry",
    "StockItem",
    "StockType",
]
