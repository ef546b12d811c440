# inventory/urls.py

"""
INVENTORY URLS

Registered under /api/inventory/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from inventory.views import StockEntryViewSet, StockItemViewSet, StockValuationView

router = DefaultRouter()

router.register(r"items", StockItemViewSet, basename="stock-items")
router.register(r"entries", StockEntryViewSet, basename="stock-entries")

urlpatterns = [
    path("valuation/", StockValuationView.as_view(), name="stock-valuation"),
    path("", include(router.urls)),
]
