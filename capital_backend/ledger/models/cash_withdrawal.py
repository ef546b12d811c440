# ledger/models/cash_withdrawal.py

"""
CASH WITHDRAWAL (TAKE-PROFIT LOG)

Two-phase owner withdrawal:
    PROPOSED -> COMPLETED  (ledger cash reduced, before/after recorded)
    PROPOSED -> CANCELLED  (ledger untouched)

COMPLETED and CANCELLED are terminal.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q


class CashWithdrawal(models.Model):
    class Status(models.TextChoices):
        PROPOSED = "PROPOSED", "Proposed"
        COMPLETED = "COMPLETED", "Completed"
        CANCELLED = "CANCELLED", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PROPOSED,
    )

    # Filled on confirmation
    previous_cash_in_hand = models.DecimalField(
        max_digits=14, decimal_places=2, null=True, blank=True
    )
    new_cash_in_hand = models.DecimalField(
        max_digits=14, decimal_places=2, null=True, blank=True
    )

    notes = models.CharField(max_length=255, blank=True, default="")

    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="requested_withdrawals",
    )
    confirmed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="confirmed_withdrawals",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="ledger_cash_status_9a2e71_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="chk_withdrawal_amount_gt_zero",
            ),
        ]

    @property
    def is_terminal(self) -> bool:
        return self.status in (self.Status.COMPLETED, self.Status.CANCELLED)

    def __str__(self):
        return f"Withdrawal {self.amount} [{self.status}]"
