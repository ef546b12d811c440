# ledger/services/store.py

"""
======================================================
PATH: ledger/services/store.py
======================================================
LEDGER STORE (persistence adapter)

Owns every read and write of the singleton CapitalLedgerRecord.

Guarantees:
- get() never fabricates a record (LedgerRecordNotFound instead)
- get_or_initialize() creates the record at most once, even when two
  callers race on an empty table (IntegrityError -> re-read)
- update_fields() is conditional on the caller's version; a stale version
  raises LedgerWriteConflict and writes nothing
- Database failures surface as StorageUnavailableError
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from ledger.models import MAIN_RECORD_ID, CapitalLedgerRecord
from ledger.services.exceptions import (
    LedgerRecordNotFound,
    LedgerWriteConflict,
    StorageUnavailableError,
)
from ledger.services.rules import ZERO, LedgerSnapshot

logger = logging.getLogger(__name__)

WRITABLE_FIELDS = frozenset(
    {"cash_in_hand", "total_stock_value", "total_investment", "total_profit"}
)


def _to_snapshot(record: CapitalLedgerRecord) -> LedgerSnapshot:
    return LedgerSnapshot(
        cash_in_hand=Decimal(record.cash_in_hand),
        total_stock_value=Decimal(record.total_stock_value),
        total_investment=Decimal(record.total_investment),
        total_profit=Decimal(record.total_profit),
        version=record.version,
        last_updated=record.last_updated,
    )


class LedgerStore:
    def __init__(self, record_id: str = MAIN_RECORD_ID):
        self.record_id = record_id

    def _queryset(self):
        return CapitalLedgerRecord.objects.filter(pk=self.record_id)

    # -------------------------------------------------
    # READS
    # -------------------------------------------------

    def get(self) -> LedgerSnapshot:
        try:
            record = self._queryset().first()
        except DatabaseError as exc:
            raise StorageUnavailableError("Capital ledger could not be read") from exc

        if record is None:
            raise LedgerRecordNotFound(f"Capital ledger record {self.record_id!r} does not exist")
        return _to_snapshot(record)

    def get_or_initialize(self, *, initial_capital: Decimal) -> LedgerSnapshot:
        try:
            return self.get()
        except LedgerRecordNotFound:
            pass

        try:
            with transaction.atomic():
                record = CapitalLedgerRecord.objects.create(
                    record_id=self.record_id,
                    cash_in_hand=initial_capital,
                    total_stock_value=ZERO,
                    total_investment=initial_capital,
                    total_profit=ZERO,
                )
        except IntegrityError:
            # Another caller initialised it first.
            return self.get()
        except DatabaseError as exc:
            raise StorageUnavailableError("Capital ledger could not be initialised") from exc

        logger.info(
            "Capital ledger initialised",
            extra={"record_id": self.record_id, "initial_capital": str(initial_capital)},
        )
        return _to_snapshot(record)

    # -------------------------------------------------
    # WRITES
    # -------------------------------------------------

    def put(self, snapshot: LedgerSnapshot) -> LedgerSnapshot:
        """Unconditional overwrite (admin repair / fixtures)."""
        try:
            with transaction.atomic():
                record, _ = CapitalLedgerRecord.objects.update_or_create(
                    record_id=self.record_id,
                    defaults={
                        "cash_in_hand": snapshot.cash_in_hand,
                        "total_stock_value": snapshot.total_stock_value,
                        "total_investment": snapshot.total_investment,
                        "total_profit": snapshot.total_profit,
                        "last_updated": timezone.now(),
                    },
                )
                CapitalLedgerRecord.objects.filter(pk=record.pk).update(version=F("version") + 1)
        except DatabaseError as exc:
            raise StorageUnavailableError("Capital ledger could not be written") from exc
        return self.get()

    def update_fields(self, fields: dict, *, expected_version: int) -> LedgerSnapshot:
        unknown = set(fields) - WRITABLE_FIELDS
        if unknown:
            raise ValueError(f"Not a ledger value field: {sorted(unknown)}")

        try:
            updated = self._queryset().filter(version=expected_version).update(
                **fields,
                version=F("version") + 1,
                last_updated=timezone.now(),
            )
        except DatabaseError as exc:
            raise StorageUnavailableError("Capital ledger could not be written") from exc

        if updated == 0:
            raise LedgerWriteConflict(
                f"Capital ledger changed since version {expected_version}"
            )
        return self.get()
