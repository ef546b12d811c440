# inventory/models/stock_item.py

"""
STOCK ITEM (CURRENT LEVEL)

One row per (stock_type, item_type, variation_name).

- RETAIL quantities are pieces; unit_price is per piece.
- WHOLESALE quantities are packets; unit_price is per piece and a packet
  holds CAPITAL_LEDGER["WHOLESALE_PIECES_PER_PACKET"] pieces.
- quantity is mutated ONLY via inventory.services.stock_service
"""

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Q

from ledger import conf


class StockType(models.TextChoices):
    RETAIL = "RETAIL", "Retail (pieces)"
    WHOLESALE = "WHOLESALE", "Wholesale (packets)"


class StockItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    stock_type = models.CharField(max_length=16, choices=StockType.choices)
    item_type = models.CharField(max_length=128)
    variation_name = models.CharField(max_length=128)

    quantity = models.PositiveIntegerField(
        default=0,
        help_text="Pieces (retail) or packets (wholesale). Service-managed only.",
    )

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Cost per piece.",
    )

    low_stock_threshold = models.PositiveIntegerField(default=10)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["stock_type", "item_type", "variation_name"]
        indexes = [
            models.Index(fields=["stock_type", "item_type"], name="inventory_s_stock_t_3b8f21_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["stock_type", "item_type", "variation_name"],
                name="unique_stock_item_variation",
            ),
            models.CheckConstraint(
                condition=Q(unit_price__gte=0),
                name="chk_stockitem_unit_price_gte_zero",
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

    @property
    def is_low_stock(self) -> bool:
        return int(self.quantity or 0) <= int(self.low_stock_threshold or 0)

    def __str__(self):
        return f"{self.stock_type} {self.item_type} / {self.variation_name} x{self.quantity}"
