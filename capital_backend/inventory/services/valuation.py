# inventory/services/valuation.py

"""
======================================================
PATH: inventory/services/valuation.py
======================================================
LIVE STOCK VALUATION

    retail value    = sum(unit_price * quantity)
    wholesale value = sum(unit_price * quantity * pieces_per_packet)
    total           = retail + wholesale

Both sums run in the database, one aggregate query per valuation.

Also home of unit-price parsing for variation names:
    "30-26"    -> 26   (last hyphen segment)
    "stamp_50" -> 50   (last underscore segment)
    "26"       -> 26
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db.models import Case, DecimalField, ExpressionWrapper, F, Sum, Value, When
from django.db.models.functions import Coalesce

from inventory.models import StockItem, StockType
from ledger import conf

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

_MONEY_FIELD = DecimalField(max_digits=18, decimal_places=2)

_PRICE_SEPARATORS = re.compile(r"[-_]")


def _money(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def parse_unit_price(variation_name) -> Decimal | None:
    """
    Best-effort price from a variation label. Returns None when the last
    segment is not a non-negative number.
    """
    label = str(variation_name or "").strip()
    if not label:
        return None

    candidate = _PRICE_SEPARATORS.split(label)[-1].strip()
    try:
        price = Decimal(candidate)
    except (InvalidOperation, ValueError):
        return None

    if not price.is_finite() or price < ZERO:
        return None
    return _money(price)


def pieces_per_unit(stock_type: str) -> int:
    if stock_type == StockType.WHOLESALE:
        return conf.wholesale_pieces_per_packet()
    return 1


@dataclass(frozen=True)
class StockValuation:
    retail_value: Decimal
    wholesale_value: Decimal
    pieces_per_packet: int

    @property
    def total_value(self) -> Decimal:
        return _money(self.retail_value + self.wholesale_value)


def _line_total(stock_type: str):
    return Coalesce(
        Sum(
            Case(
                When(
                    stock_type=stock_type,
                    then=ExpressionWrapper(F("unit_price") * F("quantity"), output_field=_MONEY_FIELD),
                ),
                output_field=_MONEY_FIELD,
            )
        ),
        Value(ZERO),
        output_field=_MONEY_FIELD,
    )


def get_stock_valuation() -> StockValuation:
    per_packet = conf.wholesale_pieces_per_packet()

    totals = StockItem.objects.aggregate(
        retail_total=_line_total(StockType.RETAIL),
        wholesale_total=_line_total(StockType.WHOLESALE),
    )

    return StockValuation(
        retail_value=_money(totals["retail_total"]),
        wholesale_value=_money(_money(totals["wholesale_total"]) * per_packet),
        pieces_per_packet=per_packet,
    )


def get_aggregate_stock_value() -> Decimal:
    return get_stock_valuation().total_value
