"""
======================================================
PATH: sales/views/sale_transaction.py
======================================================
SALE TRANSACTIONS

GET    /api/sales/transactions/         sales.view   (filter: sale_type, status, customer)
POST   /api/sales/transactions/         sales.record
DELETE /api/sales/transactions/<id>/    sales.reverse  (reversal; the row is kept as REVERSED)
GET    /api/sales/transactions/summary/ sales.view   (totals over completed sales)
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import Count, Sum
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from inventory.services.exceptions import InsufficientStockError, StockItemNotFoundError
from permissions.roles import (
    CAP_SALES_RECORD,
    CAP_SALES_REVERSE,
    CAP_SALES_VIEW,
    HasCapability,
)
from sales.models import SaleTransaction
from sales.serializers import SaleTransactionCreateSerializer, SaleTransactionSerializer
from sales.services.exceptions import SaleAlreadyReversedError, SaleNotFoundError
from sales.services.sale_service import record_sale, reverse_sale


class SaleTransactionViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = SaleTransactionSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"

    required_capability = None

    filterset_fields = ["sale_type", "status", "customer", "item_type"]

    def get_permissions(self):
        if self.action == "create":
            self.required_capability = CAP_SALES_RECORD
        elif self.action == "destroy":
            self.required_capability = CAP_SALES_REVERSE
        else:
            self.required_capability = CAP_SALES_VIEW
        return [IsAuthenticated(), HasCapability()]

    def get_queryset(self):
        return SaleTransaction.objects.select_related(
            "customer", "recorded_by", "reversed_by"
        ).order_by("-sold_at", "-created_at")

    def get_serializer_class(self):
        if self.action == "create":
            return SaleTransactionCreateSerializer
        return SaleTransactionSerializer

    @extend_schema(request=SaleTransactionCreateSerializer, responses={201: SaleTransactionSerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        v = serializer.validated_data

        try:
            sale = record_sale(
                sale_type=v["sale_type"],
                item_type=v["item_type"],
                variation_name=v["variation_name"],
                quantity=v["quantity"],
                selling_price_per_unit=v["selling_price_per_unit"],
                cogs_per_piece=v.get("cogs_per_piece"),
                customer=v.get("customer"),
                sold_at=v.get("sold_at"),
                notes=v.get("notes", ""),
                user=request.user,
            )
        except StockItemNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientStockError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except ValidationError as exc:
            detail = "; ".join(exc.messages) if getattr(exc, "messages", None) else str(exc)
            return Response({"detail": detail}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SaleTransactionSerializer(sale).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        restock = (request.query_params.get("restock") or "true").strip().lower() in ("1", "true", "yes")

        try:
            sale = reverse_sale(sale_id=kwargs.get("pk"), user=request.user, restock=restock)
        except SaleNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except SaleAlreadyReversedError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(SaleTransactionSerializer(sale).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"])
    def summary(self, request):
        qs = self.filter_queryset(self.get_queryset()).filter(
            status=SaleTransaction.STATUS_COMPLETED
        )
        totals = qs.aggregate(
            count=Count("id"),
            total_amount=Sum("total_amount"),
            cogs_amount=Sum("cogs_amount"),
            net_profit=Sum("net_profit"),
        )
        zero = Decimal("0.00")
        return Response(
            {
                "count": totals["count"] or 0,
                "total_amount": str(totals["total_amount"] or zero),
                "cogs_amount": str(totals["cogs_amount"] or zero),
                "net_profit": str(totals["net_profit"] or zero),
            },
            status=status.HTTP_200_OK,
        )
