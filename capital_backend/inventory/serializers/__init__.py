from .stock_entry import StockEntryCreateSerializer, StockEntrySerializer
from .stock_item import StockItemSerializer, StockValuationSerializer

__all__ = [
    "StockEntryCreateSerializer",
    "StockEntrySerializer",
    "StockItemSerializer",
    "StockValuationSerializer",
]
