# ledger/admin.py

from django.contrib import admin

from ledger.models import CapitalLedgerRecord, CashWithdrawal, ReconciliationTask

# ============================================================
# CAPITAL LEDGER (read-only: mutated through services only)
# ============================================================


@admin.register(CapitalLedgerRecord)
class CapitalLedgerRecordAdmin(admin.ModelAdmin):
    list_display = (
        "record_id",
        "cash_in_hand",
        "total_stock_value",
        "total_investment",
        "total_profit",
        "version",
        "last_updated",
    )
    readonly_fields = list_display + ("created_at",)

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ============================================================
# OUTBOX
# ============================================================


@admin.register(ReconciliationTask)
class ReconciliationTaskAdmin(admin.ModelAdmin):
    list_display = ("id", "kind", "status", "attempts", "created_at", "processed_at")
    list_filter = ("kind", "status")
    search_fields = ("idempotency_key", "last_error")
    readonly_fields = (
        "kind",
        "amount",
        "net_profit",
        "value_removed",
        "is_last_entry",
        "idempotency_key",
        "attempts",
        "last_error",
        "created_at",
        "processed_at",
    )
    ordering = ("-created_at",)


# ============================================================
# WITHDRAWALS
# ============================================================


@admin.register(CashWithdrawal)
class CashWithdrawalAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "amount",
        "status",
        "previous_cash_in_hand",
        "new_cash_in_hand",
        "requested_by",
        "created_at",
    )
    list_filter = ("status",)
    search_fields = ("notes",)
    readonly_fields = (
        "amount",
        "status",
        "previous_cash_in_hand",
        "new_cash_in_hand",
        "requested_by",
        "confirmed_by",
        "created_at",
        "confirmed_at",
        "cancelled_at",
    )
    ordering = ("-created_at",)
