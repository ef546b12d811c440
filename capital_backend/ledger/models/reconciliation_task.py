# ledger/models/reconciliation_task.py

"""
RECONCILIATION TASK (LEDGER OUTBOX)

A durable request to reconcile the capital ledger after an inventory or
sales event. Rows are written inside the triggering transaction and are
processed after commit, so a failed reconciliation never rolls back the
stock entry / sale that caused it.

Processing order is creation order (the rules are order-sensitive).
idempotency_key is unique: enqueueing the same event twice is a no-op.
"""

from __future__ import annotations

from django.db import models


class ReconciliationTask(models.Model):
    class Kind(models.TextChoices):
        STOCK_ADDED = "STOCK_ADDED", "Stock added"
        STOCK_ENTRY_DELETED = "STOCK_ENTRY_DELETED", "Stock entry deleted"
        SALE_RECORDED = "SALE_RECORDED", "Sale recorded"
        SALE_REVERSED = "SALE_REVERSED", "Sale reversed"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        DONE = "DONE", "Done"
        FAILED = "FAILED", "Failed"

    kind = models.CharField(max_length=32, choices=Kind.choices)
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )

    # Payload (meaning depends on kind)
    amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    net_profit = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    value_removed = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    is_last_entry = models.BooleanField(default=False)

    idempotency_key = models.CharField(
        max_length=128,
        unique=True,
        null=True,
        blank=True,
    )

    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="ledger_reco_status_6c1f0a_idx"),
            models.Index(fields=["kind"], name="ledger_reco_kind_0e9b4d_idx"),
        ]

    def __str__(self):
        return f"{self.kind} [{self.status}] #{self.pk}"
