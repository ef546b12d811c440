from .stock_entry import StockEntryViewSet
from .stock_item import StockItemViewSet, StockValuationView

__all__ = [
    "StockEntryViewSet",
    "StockItemViewSet",
    "StockValuationView",
]
