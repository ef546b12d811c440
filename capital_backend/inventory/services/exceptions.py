# inventory/services/exceptions.py

"""
INVENTORY SERVICE ERRORS
"""


class InventoryServiceError(Exception):
    """Base exception for inventory service failures."""


class StockItemNotFoundError(InventoryServiceError):
    """Raised when no stock item matches (stock_type, item_type, variation_name)."""


class InsufficientStockError(InventoryServiceError):
    """Raised when a deduction would take a stock item below zero."""


class StockEntryNotFoundError(InventoryServiceError):
    """Raised when a stock entry id does not resolve."""
