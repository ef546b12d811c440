# ledger/services/rules.py

"""
======================================================
PATH: ledger/services/rules.py
======================================================
CAPITAL LEDGER RECONCILIATION RULES (PURE)

Every rule takes the current snapshot (+ the live inventory valuation) and
returns a LedgerUpdate: the fields to write and the path that produced them.
No I/O happens here; the CapitalLedger service owns reads, writes and retries.

Rules:
- stock added        recorded value: cash -= value, stock = live, investment = max(investment, stock)
                     no value, delta > 0: same, with delta as the value
- stock deleted      explicit value: cash += |value|, stock = live
                     no value, stock dropped: cash += drop, stock = live
                     last entry: collapse to the baseline
- sale recorded      amount >= 0: cash += amount, profit += net_profit (> 0) else amount
                     amount < 0 (reversal): cash -= |amount|, profit -= |net_profit| else |amount|
                     no amount, stock dropped: cash += drop, profit += drop
- refresh            dispatch on the sign of (live - stored)
- withdrawal         0 < amount <= cash: cash -= amount

cash_in_hand and total_stock_value are clamped at zero.
Anything that does not qualify falls back to a resync (stock = live only).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ledger.services.exceptions import WithdrawalValidationError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

CLAMPED_FIELDS = ("cash_in_hand", "total_stock_value")

# Paths (logged + returned to callers for observability)
PATH_STOCK_ADDED = "stock_added"
PATH_STOCK_ENTRY_DELETED = "stock_entry_deleted"
PATH_STOCK_DELETION_INFERRED = "stock_deletion_inferred"
PATH_LAST_ENTRY_RESET = "last_entry_reset"
PATH_SALE_RECORDED = "sale_recorded"
PATH_SALE_REVERSED = "sale_reversed"
PATH_SALE_INFERRED = "sale_inferred"
PATH_WITHDRAWAL = "withdrawal"
PATH_RESYNC = "resync"


def _q2(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


# -------------------------------------------------
# TYPES
# -------------------------------------------------


@dataclass(frozen=True)
class LedgerSnapshot:
    cash_in_hand: Decimal
    total_stock_value: Decimal
    total_investment: Decimal
    total_profit: Decimal
    version: int = 1
    last_updated: datetime | None = None

    def as_dict(self) -> dict:
        return {
            "cash_in_hand": str(self.cash_in_hand),
            "total_stock_value": str(self.total_stock_value),
            "total_investment": str(self.total_investment),
            "total_profit": str(self.total_profit),
            "version": self.version,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }


@dataclass(frozen=True)
class LedgerUpdate:
    fields: dict
    path: str
    clamped: tuple = field(default_factory=tuple)


def _build(fields: dict, path: str) -> LedgerUpdate:
    values = {name: _q2(value) for name, value in fields.items()}
    clamped = []
    for name in CLAMPED_FIELDS:
        if name in values and values[name] < ZERO:
            values[name] = ZERO
            clamped.append(name)
    return LedgerUpdate(fields=values, path=path, clamped=tuple(clamped))


def resync(live_stock_value) -> LedgerUpdate:
    return _build({"total_stock_value": live_stock_value}, PATH_RESYNC)


def stock_value_delta(snapshot: LedgerSnapshot, live_stock_value) -> Decimal:
    return _q2(live_stock_value) - _q2(snapshot.total_stock_value)


# -------------------------------------------------
# STOCK
# -------------------------------------------------


def apply_stock_addition(snapshot: LedgerSnapshot, live_stock_value, *, value_added=None) -> LedgerUpdate:
    """
    value_added is the purchase value recorded when the stock arrived.
    Without it the purchase is inferred from the rise in stock value since the
    last write, which only holds while nothing else has moved stock since.
    """
    live = _q2(live_stock_value)
    if value_added is not None:
        spent = abs(_q2(value_added))
        if spent == ZERO:
            return resync(live)
    else:
        spent = stock_value_delta(snapshot, live)
        if spent <= ZERO:
            return resync(live)

    return _build(
        {
            "cash_in_hand": snapshot.cash_in_hand - spent,
            "total_stock_value": live,
            "total_investment": max(_q2(snapshot.total_investment), live),
        },
        PATH_STOCK_ADDED,
    )


def apply_stock_deletion(
    snapshot: LedgerSnapshot,
    live_stock_value,
    *,
    value_removed=None,
    is_last_entry: bool = False,
    baseline=ZERO,
) -> LedgerUpdate:
    live = _q2(live_stock_value)

    if is_last_entry:
        baseline = _q2(baseline)
        return _build(
            {
                "cash_in_hand": baseline,
                "total_stock_value": ZERO,
                "total_investment": baseline,
                "total_profit": ZERO,
            },
            PATH_LAST_ENTRY_RESET,
        )

    if value_removed is not None:
        returned = abs(_q2(value_removed))
        return _build(
            {
                "cash_in_hand": snapshot.cash_in_hand + returned,
                "total_stock_value": live,
            },
            PATH_STOCK_ENTRY_DELETED,
        )

    drop = -stock_value_delta(snapshot, live)
    if drop <= ZERO:
        return resync(live)

    return _build(
        {
            "cash_in_hand": snapshot.cash_in_hand + drop,
            "total_stock_value": live,
        },
        PATH_STOCK_DELETION_INFERRED,
    )


# -------------------------------------------------
# SALES
# -------------------------------------------------


def apply_inferred_sale(snapshot: LedgerSnapshot, live_stock_value) -> LedgerUpdate:
    """
    Sale with no amount: the drop in stock value is treated as both the cash
    received and the profit earned.
    """
    live = _q2(live_stock_value)
    drop = -stock_value_delta(snapshot, live)
    if drop <= ZERO:
        return resync(live)

    return _build(
        {
            "cash_in_hand": snapshot.cash_in_hand + drop,
            "total_stock_value": live,
            "total_profit": snapshot.total_profit + drop,
        },
        PATH_SALE_INFERRED,
    )


def apply_sale(
    snapshot: LedgerSnapshot,
    live_stock_value,
    *,
    amount=None,
    net_profit=None,
) -> LedgerUpdate:
    if amount is None:
        return apply_inferred_sale(snapshot, live_stock_value)

    live = _q2(live_stock_value)
    amount = _q2(amount)
    profit = _q2(net_profit) if net_profit is not None else None

    if amount >= ZERO:
        gain = profit if profit is not None and profit > ZERO else amount
        return _build(
            {
                "cash_in_hand": snapshot.cash_in_hand + amount,
                "total_stock_value": live,
                "total_profit": snapshot.total_profit + gain,
            },
            PATH_SALE_RECORDED,
        )

    returned = -amount
    loss = abs(profit) if profit is not None and profit != ZERO else returned
    return _build(
        {
            "cash_in_hand": snapshot.cash_in_hand - returned,
            "total_stock_value": live,
            "total_profit": snapshot.total_profit - loss,
        },
        PATH_SALE_REVERSED,
    )


# -------------------------------------------------
# REFRESH
# -------------------------------------------------


def apply_refresh(snapshot: LedgerSnapshot, live_stock_value) -> LedgerUpdate:
    delta = stock_value_delta(snapshot, live_stock_value)
    if delta > ZERO:
        return apply_stock_addition(snapshot, live_stock_value)
    if delta < ZERO:
        return apply_inferred_sale(snapshot, live_stock_value)
    return resync(live_stock_value)


# -------------------------------------------------
# WITHDRAWALS
# -------------------------------------------------


def validate_withdrawal_amount(raw_amount, *, cash_in_hand) -> Decimal:
    try:
        amount = _q2(raw_amount)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise WithdrawalValidationError("Withdrawal amount must be a number") from exc

    if not amount.is_finite():
        raise WithdrawalValidationError("Withdrawal amount must be a number")

    if amount <= ZERO:
        raise WithdrawalValidationError("Withdrawal amount must be greater than zero")

    if amount > _q2(cash_in_hand):
        raise WithdrawalValidationError(
            f"Withdrawal amount {amount} exceeds cash in hand {_q2(cash_in_hand)}"
        )
    return amount


def apply_withdrawal(snapshot: LedgerSnapshot, amount) -> LedgerUpdate:
    amount = validate_withdrawal_amount(amount, cash_in_hand=snapshot.cash_in_hand)
    return _build({"cash_in_hand": snapshot.cash_in_hand - amount}, PATH_WITHDRAWAL)
