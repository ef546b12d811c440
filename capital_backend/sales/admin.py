# sales/admin.py

from django.contrib import admin

from sales.models import Customer, SaleTransaction


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "customer_type", "phone_number", "email", "created_at")
    list_filter = ("customer_type",)
    search_fields = ("name", "phone_number", "email")
    ordering = ("name",)


@admin.register(SaleTransaction)
class SaleTransactionAdmin(admin.ModelAdmin):
    list_display = (
        "sold_at",
        "sale_type",
        "item_type",
        "variation_name",
        "quantity",
        "total_amount",
        "net_profit",
        "status",
    )
    list_filter = ("sale_type", "status")
    search_fields = ("item_type", "variation_name", "customer__name")
    readonly_fields = [f.name for f in SaleTransaction._meta.fields]
    ordering = ("-sold_at",)

    # Financial snapshots: record / reverse through the API only.
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
