# inventory/serializers/stock_entry.py

from rest_framework import serializers

from inventory.models import StockEntry, StockType


class StockEntrySerializer(serializers.ModelSerializer):
    created_by = serializers.StringRelatedField()
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = StockEntry
        fields = [
            "id",
            "entry_date",
            "entry_time",
            "stock_type",
            "item_type",
            "variation_name",
            "unit_price",
            "quantity",
            "total_value",
            "created_by",
            "created_at",
        ]
        read_only_fields = fields


class StockEntryCreateSerializer(serializers.Serializer):
    """
    unit_price is optional: when omitted it is read from the variation name
    ("30-26" -> 26, "stamp_50" -> 50).
    """

    stock_type = serializers.ChoiceField(choices=StockType.choices)
    item_type = serializers.CharField(max_length=128)
    variation_name = serializers.CharField(max_length=128)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )
    low_stock_threshold = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    entry_date = serializers.DateField(required=False, allow_null=True)
    entry_time = serializers.TimeField(required=False, allow_null=True)
