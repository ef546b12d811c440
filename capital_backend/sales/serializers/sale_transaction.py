# sales/serializers/sale_transaction.py

from decimal import Decimal

from rest_framework import serializers

from inventory.models import StockType
from sales.models import Customer, SaleTransaction


class SaleTransactionSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True, default=None)
    recorded_by = serializers.StringRelatedField()
    reversed_by = serializers.StringRelatedField()

    class Meta:
        model = SaleTransaction
        fields = [
            "id",
            "sale_type",
            "customer",
            "customer_name",
            "item_type",
            "variation_name",
            "quantity",
            "pieces_per_unit",
            "selling_price_per_unit",
            "cogs_per_piece",
            "total_amount",
            "cogs_amount",
            "net_profit",
            "status",
            "notes",
            "recorded_by",
            "reversed_by",
            "sold_at",
            "reversed_at",
            "created_at",
        ]
        read_only_fields = fields


class SaleTransactionCreateSerializer(serializers.Serializer):
    """
    selling_price_per_unit is per piece (RETAIL) or per packet (WHOLESALE).
    cogs_per_piece defaults to the stock item's unit price.
    """

    sale_type = serializers.ChoiceField(choices=StockType.choices)
    item_type = serializers.CharField(max_length=128)
    variation_name = serializers.CharField(max_length=128)
    quantity = serializers.IntegerField(min_value=1)
    selling_price_per_unit = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00")
    )
    cogs_per_piece = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )
    customer = serializers.PrimaryKeyRelatedField(
        queryset=Customer.objects.all(),
        required=False,
        allow_null=True,
    )
    sold_at = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
