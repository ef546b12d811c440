# ledger/api/serializers.py

"""
LEDGER API SERIALIZERS
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from ledger.models import CashWithdrawal, ReconciliationTask


class LedgerSnapshotSerializer(serializers.Serializer):
    cash_in_hand = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_stock_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_investment = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_profit = serializers.DecimalField(max_digits=14, decimal_places=2)
    version = serializers.IntegerField()
    last_updated = serializers.DateTimeField(allow_null=True)


class CashWithdrawalSerializer(serializers.ModelSerializer):
    requested_by = serializers.StringRelatedField()
    confirmed_by = serializers.StringRelatedField()

    class Meta:
        model = CashWithdrawal
        fields = [
            "id",
            "amount",
            "status",
            "previous_cash_in_hand",
            "new_cash_in_hand",
            "notes",
            "requested_by",
            "confirmed_by",
            "created_at",
            "confirmed_at",
            "cancelled_at",
        ]
        read_only_fields = fields


class CashWithdrawalCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0.01"),
    )
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    confirm = serializers.BooleanField(
        required=False,
        default=False,
        help_text="Propose and confirm in one request.",
    )


class WithdrawalSummarySerializer(serializers.Serializer):
    total_withdrawn = serializers.DecimalField(max_digits=14, decimal_places=2)
    completed_count = serializers.IntegerField()
    pending_count = serializers.IntegerField()
    recent = CashWithdrawalSerializer(many=True)


class ReconciliationTaskSerializer(serializers.ModelSerializer):
    class Meta:
        model = ReconciliationTask
        fields = [
            "id",
            "kind",
            "status",
            "amount",
            "net_profit",
            "value_removed",
            "is_last_entry",
            "idempotency_key",
            "attempts",
            "last_error",
            "created_at",
            "processed_at",
        ]
        read_only_fields = fields
