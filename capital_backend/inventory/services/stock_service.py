# inventory/services/stock_service.py

"""
======================================================
PATH: inventory/services/stock_service.py
======================================================
STOCK SERVICES

Purpose:
- add_stock:          raise a StockItem level + append a StockEntry
- delete_stock_entry: remove an entry and take its quantity back out of stock
- deduct_stock:       conditional decrement used by sales (never below zero)
- restore_stock:      put quantity back (sale reversal)

Ledger coupling:
- add_stock / delete_stock_entry enqueue a capital ledger reconciliation in
  the same transaction (ledger.services.hooks). The ledger is updated after
  commit; a ledger failure never undoes the stock change.
- deduct_stock / restore_stock do NOT touch the ledger; the sale service
  enqueues the sale event instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from inventory.models import StockEntry, StockItem, StockType
from inventory.services.exceptions import (
    InsufficientStockError,
    StockEntryNotFoundError,
    StockItemNotFoundError,
)
from inventory.services.valuation import parse_unit_price
from ledger.services import hooks

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _require_stock_type(value) -> str:
    stock_type = str(value or "").strip().upper()
    if stock_type not in StockType.values:
        raise ValidationError(f"stock_type must be one of {', '.join(StockType.values)}")
    return stock_type


def _require_label(value, *, field_name: str) -> str:
    label = str(value or "").strip()
    if not label:
        raise ValidationError(f"{field_name} is required")
    return label


def _require_positive_int(value, *, field_name: str) -> int:
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        v = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if v <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return v


def _resolve_unit_price(unit_price, variation_name: str) -> Decimal:
    if unit_price not in (None, ""):
        try:
            price = _money(unit_price)
        except Exception as exc:
            raise ValidationError("unit_price must be a valid decimal") from exc
    else:
        price = parse_unit_price(variation_name)
        if price is None:
            raise ValidationError(
                "unit_price is required when it cannot be read from the variation name"
            )

    if price < Decimal("0.00"):
        raise ValidationError("unit_price cannot be negative")
    return price


def _item_lookup(stock_type: str, item_type: str, variation_name: str) -> dict:
    return {
        "stock_type": stock_type,
        "item_type": item_type,
        "variation_name": variation_name,
    }


# -------------------------------------------------
# INTAKE
# -------------------------------------------------


@transaction.atomic
def add_stock(
    *,
    stock_type,
    item_type,
    variation_name,
    quantity,
    unit_price=None,
    low_stock_threshold=None,
    entry_date=None,
    entry_time=None,
    user=None,
) -> StockEntry:
    """
    Existing item: quantity += qty (the item's unit price stays authoritative).
    New item: created with the given / parsed unit price.
    """
    stock_type = _require_stock_type(stock_type)
    item_type = _require_label(item_type, field_name="item_type")
    variation_name = _require_label(variation_name, field_name="variation_name")
    qty = _require_positive_int(quantity, field_name="quantity")
    price = _resolve_unit_price(unit_price, variation_name)

    lookup = _item_lookup(stock_type, item_type, variation_name)
    item = StockItem.objects.select_for_update().filter(**lookup).first()

    if item is None:
        item = StockItem(**lookup, quantity=qty, unit_price=price)
        if low_stock_threshold is not None:
            item.low_stock_threshold = _require_positive_int(
                low_stock_threshold, field_name="low_stock_threshold"
            )
        item.save()
    else:
        if _money(item.unit_price) != price:
            logger.warning(
                "Stock intake price differs from item price; keeping item price",
                extra={
                    "item_id": str(item.id),
                    "item_price": str(item.unit_price),
                    "intake_price": str(price),
                },
            )
            price = _money(item.unit_price)

        update_fields = ["quantity", "updated_at"]
        item.quantity = int(item.quantity or 0) + qty
        if low_stock_threshold is not None:
            item.low_stock_threshold = _require_positive_int(
                low_stock_threshold, field_name="low_stock_threshold"
            )
            update_fields.append("low_stock_threshold")
        item.save(update_fields=update_fields)

    entry_kwargs = {}
    if entry_date:
        entry_kwargs["entry_date"] = entry_date
    if entry_time:
        entry_kwargs["entry_time"] = entry_time

    entry = StockEntry.objects.create(
        **lookup,
        unit_price=price,
        quantity=qty,
        created_by=user if getattr(user, "is_authenticated", False) else None,
        **entry_kwargs,
    )

    hooks.on_stock_added(entry.total_value, idempotency_key=f"stock-entry:{entry.id}:added")

    logger.info(
        "Stock added",
        extra={
            "entry_id": str(entry.id),
            "stock_type": stock_type,
            "item_type": item_type,
            "variation_name": variation_name,
            "quantity": qty,
            "value": str(entry.total_value),
        },
    )
    return entry


# -------------------------------------------------
# ENTRY DELETION
# -------------------------------------------------


@dataclass(frozen=True)
class StockEntryDeletion:
    entry_id: str
    value_removed: Decimal
    quantity_removed: int
    is_last_entry: bool


@transaction.atomic
def delete_stock_entry(*, entry_id, user=None) -> StockEntryDeletion:
    entry = StockEntry.objects.select_for_update().filter(pk=entry_id).first()
    if entry is None:
        raise StockEntryNotFoundError(f"Stock entry {entry_id} not found")

    value_removed = _money(entry.total_value)
    lookup = _item_lookup(entry.stock_type, entry.item_type, entry.variation_name)

    item = StockItem.objects.select_for_update().filter(**lookup).first()
    removed = 0
    if item is None:
        logger.warning("Stock entry has no matching stock item", extra={"entry_id": str(entry.id)})
    else:
        removed = min(int(item.quantity or 0), int(entry.quantity))
        if removed < entry.quantity:
            logger.warning(
                "Stock item holds less than the entry quantity; clamping at zero",
                extra={
                    "entry_id": str(entry.id),
                    "item_quantity": item.quantity,
                    "entry_quantity": entry.quantity,
                },
            )
        item.quantity = int(item.quantity or 0) - removed
        item.save(update_fields=["quantity", "updated_at"])

    deleted_id = str(entry.id)
    entry.delete()

    is_last_entry = not StockEntry.objects.exists()

    hooks.on_stock_entry_deleted(
        value_removed=value_removed,
        is_last_entry=is_last_entry,
        idempotency_key=f"stock-entry:{deleted_id}:deleted",
    )

    logger.info(
        "Stock entry deleted",
        extra={
            "entry_id": deleted_id,
            "value_removed": str(value_removed),
            "is_last_entry": is_last_entry,
            "user_id": str(getattr(user, "id", "") or ""),
        },
    )
    return StockEntryDeletion(
        entry_id=deleted_id,
        value_removed=value_removed,
        quantity_removed=removed,
        is_last_entry=is_last_entry,
    )


# -------------------------------------------------
# SALES SUPPORT
# -------------------------------------------------


def get_stock_item(*, stock_type, item_type, variation_name) -> StockItem:
    lookup = _item_lookup(
        _require_stock_type(stock_type),
        _require_label(item_type, field_name="item_type"),
        _require_label(variation_name, field_name="variation_name"),
    )
    item = StockItem.objects.filter(**lookup).first()
    if item is None:
        raise StockItemNotFoundError(
            f"No {lookup['stock_type']} stock for {lookup['item_type']} / {lookup['variation_name']}"
        )
    return item


@transaction.atomic
def deduct_stock(*, stock_type, item_type, variation_name, quantity) -> StockItem:
    """
    Conditional decrement: succeeds only while quantity >= qty, so two
    concurrent sales can never drive a level negative.
    """
    item = get_stock_item(stock_type=stock_type, item_type=item_type, variation_name=variation_name)
    qty = _require_positive_int(quantity, field_name="quantity")

    updated = StockItem.objects.filter(pk=item.pk, quantity__gte=qty).update(
        quantity=F("quantity") - qty
    )
    if updated == 0:
        item.refresh_from_db(fields=["quantity"])
        raise InsufficientStockError(
            f"Insufficient stock for {item.item_type} / {item.variation_name}: "
            f"requested {qty}, available {item.quantity}"
        )

    item.refresh_from_db()
    if item.is_low_stock:
        logger.warning(
            "Stock item is low",
            extra={"item_id": str(item.id), "quantity": item.quantity},
        )
    return item


@transaction.atomic
def restore_stock(*, stock_type, item_type, variation_name, quantity) -> StockItem | None:
    qty = _require_positive_int(quantity, field_name="quantity")
    lookup = _item_lookup(
        _require_stock_type(stock_type),
        _require_label(item_type, field_name="item_type"),
        _require_label(variation_name, field_name="variation_name"),
    )

    updated = StockItem.objects.filter(**lookup).update(quantity=F("quantity") + qty)
    if updated == 0:
        logger.warning("Cannot restore stock: item no longer exists", extra=lookup)
        return None
    return StockItem.objects.get(**lookup)
