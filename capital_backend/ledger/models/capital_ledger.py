# ledger/models/capital_ledger.py

"""
======================================================
PATH: ledger/models/capital_ledger.py
======================================================
CAPITAL LEDGER RECORD

One row per business (record_id = "MAIN_RECORD") holding the four running
totals of the capital position.

Guarantees:
- Mutated ONLY through ledger.services.store.LedgerStore
- Every write bumps `version` (optimistic concurrency token)
- cash_in_hand and total_stock_value never go negative (clamped in rules)
- total_profit MAY go negative (sale reversals)
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone

MAIN_RECORD_ID = "MAIN_RECORD"


class CapitalLedgerRecord(models.Model):
    record_id = models.CharField(
        max_length=32,
        primary_key=True,
        default=MAIN_RECORD_ID,
        editable=False,
    )

    cash_in_hand = models.DecimalField(max_digits=14, decimal_places=2)

    total_stock_value = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Mirror of the live inventory valuation at the last reconciliation.",
    )

    total_investment = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="High-water mark of capital put into the business.",
    )

    total_profit = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    version = models.PositiveIntegerField(default=1)

    last_updated = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Capital Ledger Record"
        verbose_name_plural = "Capital Ledger Records"
        constraints = [
            models.CheckConstraint(
                condition=Q(cash_in_hand__gte=0),
                name="chk_ledger_cash_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(total_stock_value__gte=0),
                name="chk_ledger_stock_value_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(total_investment__gte=0),
                name="chk_ledger_investment_gte_zero",
            ),
        ]

    def __str__(self):
        return (
            f"{self.record_id} cash={self.cash_in_hand} stock={self.total_stock_value} "
            f"investment={self.total_investment} profit={self.total_profit} v{self.version}"
        )
