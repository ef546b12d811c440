# inventory/serializers/stock_item.py

from rest_framework import serializers

from inventory.models import StockItem


class StockItemSerializer(serializers.ModelSerializer):
    """
    Read-only view of a stock level. Quantities change through stock entries
    and sales only.
    """

    pieces_per_unit = serializers.IntegerField(read_only=True)
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = StockItem
        fields = [
            "id",
            "stock_type",
            "item_type",
            "variation_name",
            "quantity",
            "unit_price",
            "low_stock_threshold",
            "pieces_per_unit",
            "total_value",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class StockValuationSerializer(serializers.Serializer):
    retail_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    wholesale_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    pieces_per_packet = serializers.IntegerField()
