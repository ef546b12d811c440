# sales/urls.py

"""
SALES URLS

Registered under /api/sales/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from sales.views import CustomerViewSet, SaleTransactionViewSet

router = DefaultRouter()

router.register(r"customers", CustomerViewSet, basename="customers")
router.register(r"transactions", SaleTransactionViewSet, basename="sale-transactions")

urlpatterns = [
    path("", include(router.urls)),
]
