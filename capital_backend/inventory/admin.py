# inventory/admin.py

from django.contrib import admin

from inventory.models import StockEntry, StockItem


@admin.register(StockItem)
class StockItemAdmin(admin.ModelAdmin):
    list_display = (
        "item_type",
        "variation_name",
        "stock_type",
        "quantity",
        "unit_price",
        "low_stock_threshold",
        "updated_at",
    )
    list_filter = ("stock_type", "item_type")
    search_fields = ("item_type", "variation_name")
    # Levels change through stock entries + sales only.
    readonly_fields = ("quantity", "created_at", "updated_at")
    ordering = ("stock_type", "item_type", "variation_name")


@admin.register(StockEntry)
class StockEntryAdmin(admin.ModelAdmin):
    list_display = (
        "entry_date",
        "entry_time",
        "stock_type",
        "item_type",
        "variation_name",
        "quantity",
        "unit_price",
        "created_by",
    )
    list_filter = ("stock_type", "entry_date")
    search_fields = ("item_type", "variation_name")
    readonly_fields = [f.name for f in StockEntry._meta.fields]
    ordering = ("-entry_date", "-entry_time")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
