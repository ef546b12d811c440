# sales/models/sale_transaction.py

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from inventory.models import StockType
from ledger import conf

User = settings.AUTH_USER_MODEL


class SaleTransaction(models.Model):
    """
    One sale of a single stock variation.

    GUARANTEES:
    - Amounts are snapshots taken at record time (never recomputed)
    - RETAIL quantity is pieces; WHOLESALE quantity is packets
    - cogs_amount = quantity * pieces_per_unit * cogs_per_piece
    - net_profit  = total_amount - cogs_amount (may be negative)
    - Reversal is a status transition (COMPLETED -> REVERSED), never a delete
    """

    STATUS_COMPLETED = "completed"
    STATUS_REVERSED = "reversed"

    STATUS_CHOICES = [
        (STATUS_COMPLETED, "Completed"),
        (STATUS_REVERSED, "Reversed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale_type = models.CharField(max_length=16, choices=StockType.choices)

    customer = models.ForeignKey(
        "sales.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )

    item_type = models.CharField(max_length=128)
    variation_name = models.CharField(max_length=128)

    quantity = models.PositiveIntegerField()
    pieces_per_unit = models.PositiveIntegerField(default=1)

    selling_price_per_unit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Price per piece (retail) or per packet (wholesale).",
    )
    cogs_per_piece = models.DecimalField(max_digits=12, decimal_places=2)

    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    cogs_amount = models.DecimalField(max_digits=14, decimal_places=2)
    net_profit = models.DecimalField(max_digits=14, decimal_places=2)

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_COMPLETED,
    )

    notes = models.CharField(max_length=255, blank=True, default="")

    recorded_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_sales",
    )
    reversed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reversed_sales",
    )

    sold_at = models.DateTimeField(default=timezone.now)
    reversed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-sold_at", "-created_at"]
        indexes = [
            models.Index(fields=["sale_type", "sold_at"], name="sales_sale_sale_ty_2c4e9b_idx"),
            models.Index(fields=["status"], name="sales_sale_status_71d3aa_idx"),
            models.Index(fields=["item_type", "variation_name"], name="sales_sale_item_ty_f05b62_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_sale_qty_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(total_amount__gte=0),
                name="chk_sale_total_gte_zero",
            ),
        ]

    @property
    def is_reversed(self) -> bool:
        return self.status == self.STATUS_REVERSED

    @property
    def pieces_sold(self) -> int:
        return int(self.quantity or 0) * int(self.pieces_per_unit or 1)

    @staticmethod
    def pieces_per_unit_for(sale_type: str) -> int:
        if sale_type == StockType.WHOLESALE:
            return conf.wholesale_pieces_per_packet()
        return 1

    def __str__(self):
        return f"{self.sale_type} {self.item_type} / {self.variation_name} x{self.quantity} = {self.total_amount}"
