# inventory/models/stock_entry.py

"""
STOCK ENTRY (INTAKE LOG)

One row per "add stock" action. Deleting an entry removes its quantity
from the matching StockItem and returns its value to cash in hand.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from ledger import conf

from .stock_item import StockType


def _local_date():
    return timezone.localdate()


def _local_time():
    return timezone.localtime().time().replace(microsecond=0)


class StockEntry(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    entry_date = models.DateField(default=_local_date)
    entry_time = models.TimeField(default=_local_time)

    stock_type = models.CharField(max_length=16, choices=StockType.choices)
    item_type = models.CharField(max_length=128)
    variation_name = models.CharField(max_length=128)

    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    quantity = models.PositiveIntegerField()

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_entries",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "Stock entries"
        ordering = ["-entry_date", "-entry_time", "-created_at"]
        indexes = [
            models.Index(fields=["entry_date"], name="inventory_s_entry_d_a41c07_idx"),
            models.Index(
                fields=["stock_type", "item_type", "variation_name"],
                name="inventory_s_stock_t_e92d5a_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_stockentry_qty_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(unit_price__gte=0),
                name="chk_stockentry_unit_price_gte_zero",
            ),
        ]

    @property
    def pieces_per_unit(self) -> int:
        if self.stock_type == StockType.WHOLESALE:
            return conf.wholesale_pieces_per_packet()
        return 1

    @property
    def total_value(self) -> Decimal:
        return Decimal(self.unit_price) * int(self.quantity or 0) * self.pieces_per_unit

    def __str__(self):
        return f"{self.entry_date} {self.stock_type} {self.item_type} / {self.variation_name} +{self.quantity}"
