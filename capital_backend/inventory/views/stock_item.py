"""
======================================================
PATH: inventory/views/stock_item.py
======================================================
STOCK LEVELS + VALUATION

GET /api/inventory/items/              list (filter: stock_type, item_type)
GET /api/inventory/items/low-stock/    items at or below their threshold
GET /api/inventory/valuation/          live retail / wholesale / total value
"""

from __future__ import annotations

from django.db.models import F
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from inventory.models import StockItem
from inventory.serializers import StockItemSerializer, StockValuationSerializer
from inventory.services.valuation import get_stock_valuation
from permissions.roles import (
    CAP_INVENTORY_VIEW,
    CAP_LEDGER_VIEW,
    HasAnyCapability,
    HasCapability,
)


class StockItemViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = StockItemSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_VIEW
    lookup_value_regex = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"

    filterset_fields = ["stock_type", "item_type", "variation_name"]

    def get_queryset(self):
        return StockItem.objects.all().order_by("stock_type", "item_type", "variation_name")

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        qs = self.filter_queryset(self.get_queryset()).filter(
            quantity__lte=F("low_stock_threshold")
        )
        serializer = self.get_serializer(qs, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)


class StockValuationView(APIView):
    permission_classes = [IsAuthenticated, HasAnyCapability]
    required_any_capabilities = {CAP_INVENTORY_VIEW, CAP_LEDGER_VIEW}

    @extend_schema(tags=["inventory"], responses={200: StockValuationSerializer})
    def get(self, request, *args, **kwargs):
        valuation = get_stock_valuation()
        return Response(StockValuationSerializer(valuation).data, status=status.HTTP_200_OK)
