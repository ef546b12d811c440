"""
======================================================
PATH: inventory/views/stock_entry.py
======================================================
STOCK ENTRY LOG

GET    /api/inventory/entries/        list (filter: stock_type, item_type, entry_date)
POST   /api/inventory/entries/        add stock (creates / tops up the StockItem)
DELETE /api/inventory/entries/<id>/   delete entry (deducts its quantity from stock)

Entries are immutable: there is no update endpoint.
Both writes enqueue a capital ledger reconciliation.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from inventory.models import StockEntry
from inventory.serializers import StockEntryCreateSerializer, StockEntrySerializer
from inventory.services.exceptions import StockEntryNotFoundError
from inventory.services.stock_service import add_stock, delete_stock_entry
from permissions.roles import CAP_INVENTORY_EDIT, CAP_INVENTORY_VIEW, HasCapability


def _validation_detail(exc: ValidationError) -> str:
    return "; ".join(exc.messages) if getattr(exc, "messages", None) else str(exc)


class StockEntryViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = StockEntrySerializer
    permission_classes = [IsAuthenticated]

    lookup_value_regex = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
    required_capability = None

    filterset_fields = ["stock_type", "item_type", "variation_name", "entry_date"]

    def get_permissions(self):
        if self.action in {"create", "destroy"}:
            self.required_capability = CAP_INVENTORY_EDIT
        else:
            self.required_capability = CAP_INVENTORY_VIEW
        return [IsAuthenticated(), HasCapability()]

    def get_queryset(self):
        return StockEntry.objects.select_related("created_by").order_by(
            "-entry_date", "-entry_time", "-created_at"
        )

    def get_serializer_class(self):
        if self.action == "create":
            return StockEntryCreateSerializer
        return StockEntrySerializer

    @extend_schema(request=StockEntryCreateSerializer, responses={201: StockEntrySerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        v = serializer.validated_data

        try:
            entry = add_stock(
                stock_type=v["stock_type"],
                item_type=v["item_type"],
                variation_name=v["variation_name"],
                quantity=v["quantity"],
                unit_price=v.get("unit_price"),
                low_stock_threshold=v.get("low_stock_threshold"),
                entry_date=v.get("entry_date"),
                entry_time=v.get("entry_time"),
                user=request.user,
            )
        except ValidationError as exc:
            return Response({"detail": _validation_detail(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(StockEntrySerializer(entry).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        try:
            result = delete_stock_entry(entry_id=kwargs.get("pk"), user=request.user)
        except StockEntryNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

        return Response(
            {
                "entry_id": result.entry_id,
                "value_removed": str(result.value_removed),
                "quantity_removed": result.quantity_removed,
                "is_last_entry": result.is_last_entry,
            },
            status=status.HTTP_200_OK,
        )
