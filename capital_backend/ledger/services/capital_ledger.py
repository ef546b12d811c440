# ledger/services/capital_ledger.py

"""
======================================================
PATH: ledger/services/capital_ledger.py
======================================================
CAPITAL LEDGER SERVICE

The single entry point for reading and mutating the capital position.

Write protocol (every reconcile / withdrawal):
1) read snapshot (bootstrapping the record from INITIAL_CAPITAL if absent)
2) read the live inventory valuation (skipped for withdrawals; a database
   failure here is a StorageUnavailableError like any ledger read)
3) apply a pure rule from ledger.services.rules
4) conditional write on the snapshot's version
5) on LedgerWriteConflict: re-read and re-apply, up to MAX_WRITE_RETRIES

Collaborators are injectable so tests can drive the service with a fake
store and a fixed valuation:
    CapitalLedger(store=FakeStore(), valuation=lambda: Decimal("5000.00"))
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from django.db import DatabaseError

from ledger import conf
from ledger.services import rules
from ledger.services.exceptions import LedgerWriteConflict, StorageUnavailableError
from ledger.services.rules import LedgerSnapshot, LedgerUpdate
from ledger.services.store import LedgerStore

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _q2(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _default_valuation() -> Decimal:
    from inventory.services.valuation import get_aggregate_stock_value

    return get_aggregate_stock_value()


class CapitalLedger:
    def __init__(
        self,
        *,
        store=None,
        valuation: Callable[[], Decimal] | None = None,
        initial_capital=None,
        max_retries: int | None = None,
    ):
        self.store = store if store is not None else LedgerStore()
        self.valuation = valuation or _default_valuation
        self._initial_capital = initial_capital
        self._max_retries = max_retries

    @property
    def initial_capital(self) -> Decimal:
        if self._initial_capital is not None:
            return _q2(self._initial_capital)
        return conf.initial_capital()

    @property
    def max_retries(self) -> int:
        if self._max_retries is not None:
            return max(1, int(self._max_retries))
        return conf.max_write_retries()

    # -------------------------------------------------
    # READS
    # -------------------------------------------------

    def get_snapshot(self) -> LedgerSnapshot:
        return self.store.get_or_initialize(initial_capital=self.initial_capital)

    def _live_stock_value(self) -> Decimal:
        try:
            return _q2(self.valuation())
        except DatabaseError as exc:
            raise StorageUnavailableError(f"Stock valuation unavailable: {exc}") from exc

    # -------------------------------------------------
    # WRITE LOOP
    # -------------------------------------------------

    def _write(
        self,
        operation: str,
        rule: Callable[..., LedgerUpdate],
        *,
        needs_valuation: bool = True,
    ) -> LedgerSnapshot:
        attempt = 0
        while True:
            attempt += 1
            snapshot = self.get_snapshot()

            if needs_valuation:
                live = self._live_stock_value()
                update = rule(snapshot, live)
            else:
                update = rule(snapshot)

            if update.clamped:
                logger.warning(
                    "Ledger values clamped at zero",
                    extra={
                        "operation": operation,
                        "path": update.path,
                        "clamped": list(update.clamped),
                    },
                )

            try:
                result = self.store.update_fields(update.fields, expected_version=snapshot.version)
            except LedgerWriteConflict:
                if attempt >= self.max_retries:
                    logger.error(
                        "Ledger write conflict: retries exhausted",
                        extra={"operation": operation, "attempts": attempt},
                    )
                    raise
                logger.info(
                    "Ledger write conflict, retrying",
                    extra={"operation": operation, "attempt": attempt},
                )
                continue

            logger.info(
                "Capital ledger updated",
                extra={
                    "operation": operation,
                    "path": update.path,
                    "version": result.version,
                    "cash_in_hand": str(result.cash_in_hand),
                    "total_stock_value": str(result.total_stock_value),
                },
            )
            return result

    # -------------------------------------------------
    # RECONCILIATION
    # -------------------------------------------------

    def reconcile_after_stock_addition(self, value_added=None) -> LedgerSnapshot:
        def rule(snapshot, live):
            return rules.apply_stock_addition(snapshot, live, value_added=value_added)

        return self._write("stock_addition", rule)

    def reconcile_after_stock_deletion(
        self,
        value_removed=None,
        *,
        is_last_entry: bool = False,
    ) -> LedgerSnapshot:
        baseline = self.initial_capital

        def rule(snapshot, live):
            return rules.apply_stock_deletion(
                snapshot,
                live,
                value_removed=value_removed,
                is_last_entry=is_last_entry,
                baseline=baseline,
            )

        return self._write("stock_deletion", rule)

    def reconcile_after_sale(self, amount=None, net_profit=None) -> LedgerSnapshot:
        def rule(snapshot, live):
            return rules.apply_sale(snapshot, live, amount=amount, net_profit=net_profit)

        return self._write("sale", rule)

    def refresh(self) -> LedgerSnapshot:
        return self._write("refresh", rules.apply_refresh)

    # -------------------------------------------------
    # WITHDRAWAL
    # -------------------------------------------------

    def withdraw_cash(self, amount) -> LedgerSnapshot:
        def rule(snapshot):
            return rules.apply_withdrawal(snapshot, amount)

        return self._write("withdrawal", rule, needs_valuation=False)
