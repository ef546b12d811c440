# sales/services/sale_service.py

"""
======================================================
PATH: sales/services/sale_service.py
======================================================
SALE SERVICE

record_sale (atomic):
1) compute amounts (total / COGS / net profit) from authoritative inputs
2) conditional stock decrement (never below zero)
3) persist the SaleTransaction snapshot
4) enqueue ledger reconciliation: cash += total, profit += net profit

reverse_sale (atomic):
1) COMPLETED -> REVERSED (terminal)
2) restore the sold quantity to stock
3) enqueue ledger reconciliation: cash -= total, profit -= net profit

Amounts:
    retail:    total = qty * price_per_piece
               cogs  = qty * cogs_per_piece
    wholesale: total = qty * price_per_packet
               cogs  = qty * pieces_per_packet * cogs_per_piece
    net_profit = total - cogs

cogs_per_piece defaults to the stock item's unit price (its cost basis).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from inventory.services.stock_service import deduct_stock, get_stock_item, restore_stock
from ledger.services import hooks
from sales.models import Customer, SaleTransaction
from sales.services.exceptions import SaleAlreadyReversedError, SaleNotFoundError

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _q2(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_money(value, *, field_name: str) -> Decimal:
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    try:
        amount = _q2(value)
    except Exception as exc:
        raise ValidationError(f"{field_name} must be a valid decimal") from exc
    if amount < ZERO:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount


@dataclass(frozen=True)
class SaleAmounts:
    total_amount: Decimal
    cogs_amount: Decimal
    net_profit: Decimal


def compute_sale_amounts(
    *,
    quantity: int,
    pieces_per_unit: int,
    selling_price_per_unit,
    cogs_per_piece,
) -> SaleAmounts:
    qty = int(quantity)
    total = _q2(Decimal(str(selling_price_per_unit)) * qty)
    cogs = _q2(Decimal(str(cogs_per_piece)) * qty * int(pieces_per_unit))
    return SaleAmounts(total_amount=total, cogs_amount=cogs, net_profit=total - cogs)


# -------------------------------------------------
# RECORD
# -------------------------------------------------


@transaction.atomic
def record_sale(
    *,
    sale_type,
    item_type,
    variation_name,
    quantity,
    selling_price_per_unit,
    cogs_per_piece=None,
    customer: Customer | None = None,
    sold_at=None,
    notes: str = "",
    user=None,
) -> SaleTransaction:
    item = get_stock_item(stock_type=sale_type, item_type=item_type, variation_name=variation_name)

    price = _to_money(selling_price_per_unit, field_name="selling_price_per_unit")
    cogs_piece = (
        _q2(item.unit_price)
        if cogs_per_piece in (None, "")
        else _to_money(cogs_per_piece, field_name="cogs_per_piece")
    )

    item = deduct_stock(
        stock_type=item.stock_type,
        item_type=item.item_type,
        variation_name=item.variation_name,
        quantity=quantity,
    )

    per_unit = SaleTransaction.pieces_per_unit_for(item.stock_type)
    amounts = compute_sale_amounts(
        quantity=int(quantity),
        pieces_per_unit=per_unit,
        selling_price_per_unit=price,
        cogs_per_piece=cogs_piece,
    )

    sale = SaleTransaction.objects.create(
        sale_type=item.stock_type,
        customer=customer,
        item_type=item.item_type,
        variation_name=item.variation_name,
        quantity=int(quantity),
        pieces_per_unit=per_unit,
        selling_price_per_unit=price,
        cogs_per_piece=cogs_piece,
        total_amount=amounts.total_amount,
        cogs_amount=amounts.cogs_amount,
        net_profit=amounts.net_profit,
        notes=(notes or "").strip(),
        sold_at=sold_at or timezone.now(),
        recorded_by=user if getattr(user, "is_authenticated", False) else None,
    )

    hooks.on_sale_recorded(
        amount=sale.total_amount,
        net_profit=sale.net_profit,
        idempotency_key=f"sale:{sale.id}:recorded",
    )

    logger.info(
        "Sale recorded",
        extra={
            "sale_id": str(sale.id),
            "sale_type": sale.sale_type,
            "total_amount": str(sale.total_amount),
            "net_profit": str(sale.net_profit),
        },
    )
    return sale


# -------------------------------------------------
# REVERSE
# -------------------------------------------------


@transaction.atomic
def reverse_sale(*, sale_id, user=None, restock: bool = True) -> SaleTransaction:
    sale = SaleTransaction.objects.select_for_update().filter(pk=sale_id).first()
    if sale is None:
        raise SaleNotFoundError(f"Sale {sale_id} not found")

    if sale.is_reversed:
        raise SaleAlreadyReversedError(f"Sale {sale_id} is already reversed")

    sale.status = SaleTransaction.STATUS_REVERSED
    sale.reversed_at = timezone.now()
    sale.reversed_by = user if getattr(user, "is_authenticated", False) else None
    sale.save(update_fields=["status", "reversed_at", "reversed_by"])

    if restock:
        restore_stock(
            stock_type=sale.sale_type,
            item_type=sale.item_type,
            variation_name=sale.variation_name,
            quantity=sale.quantity,
        )

    # Mirror the profit credited at record time (non-positive profit credited the amount).
    hooks.on_sale_reversed(
        amount=sale.total_amount,
        net_profit=sale.net_profit if sale.net_profit > ZERO else None,
        idempotency_key=f"sale:{sale.id}:reversed",
    )

    logger.info(
        "Sale reversed",
        extra={
            "sale_id": str(sale.id),
            "total_amount": str(sale.total_amount),
            "restocked": restock,
        },
    )
    return sale
