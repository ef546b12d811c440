# ledger/services/hooks.py

"""
======================================================
PATH: ledger/services/hooks.py
======================================================
LEDGER HOOKS (OUTBOX)

Inventory and sales services call these hooks INSIDE their own transaction.
A hook only records a ReconciliationTask row; the ledger itself is updated
after commit by process_pending_tasks().

Guarantees:
- The triggering stock entry / sale is committed regardless of what the
  ledger reconciliation does afterwards.
- Each task runs in its own error boundary: a failure is recorded on the
  task (attempts / last_error) and never propagates to the caller.
- Tasks run in creation order.
- idempotency_key makes re-delivery of the same event a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from ledger import conf
from ledger.models import ReconciliationTask
from ledger.services.capital_ledger import CapitalLedger
from ledger.services.exceptions import LedgerServiceError
from ledger.services.rules import LedgerSnapshot

logger = logging.getLogger(__name__)

Kind = ReconciliationTask.Kind
Status = ReconciliationTask.Status


@dataclass(frozen=True)
class ProcessingReport:
    processed: int = 0
    failed: int = 0
    skipped: int = 0


# -------------------------------------------------
# ENQUEUE
# -------------------------------------------------


def _enqueue(kind: str, *, idempotency_key: str | None = None, **payload) -> ReconciliationTask | None:
    key = (idempotency_key or "").strip() or None

    if key and ReconciliationTask.objects.filter(idempotency_key=key).exists():
        logger.info(
            "Duplicate ledger event ignored",
            extra={"kind": kind, "idempotency_key": key},
        )
        return None

    try:
        with transaction.atomic():
            task = ReconciliationTask.objects.create(kind=kind, idempotency_key=key, **payload)
    except IntegrityError:
        logger.info(
            "Duplicate ledger event ignored",
            extra={"kind": kind, "idempotency_key": key},
        )
        return None

    logger.info(
        "Ledger reconciliation queued",
        extra={"task_id": task.pk, "kind": kind, "idempotency_key": key},
    )

    if conf.auto_process_tasks():
        transaction.on_commit(process_pending_tasks, robust=True)
    return task


def on_stock_added(
    value_added=None,
    *,
    idempotency_key: str | None = None,
) -> ReconciliationTask | None:
    # value_added is the purchase value at intake, not at drain time.
    return _enqueue(
        Kind.STOCK_ADDED,
        idempotency_key=idempotency_key,
        amount=None if value_added is None else abs(Decimal(str(value_added))),
    )


def on_stock_entry_deleted(
    value_removed=None,
    is_last_entry: bool = False,
    *,
    idempotency_key: str | None = None,
) -> ReconciliationTask | None:
    return _enqueue(
        Kind.STOCK_ENTRY_DELETED,
        idempotency_key=idempotency_key,
        value_removed=None if value_removed is None else abs(Decimal(str(value_removed))),
        is_last_entry=bool(is_last_entry),
    )


def on_sale_recorded(
    amount=None,
    net_profit=None,
    *,
    idempotency_key: str | None = None,
) -> ReconciliationTask | None:
    return _enqueue(
        Kind.SALE_RECORDED,
        idempotency_key=idempotency_key,
        amount=None if amount is None else abs(Decimal(str(amount))),
        net_profit=net_profit,
    )


def on_sale_reversed(
    amount,
    net_profit=None,
    *,
    idempotency_key: str | None = None,
) -> ReconciliationTask | None:
    return _enqueue(
        Kind.SALE_REVERSED,
        idempotency_key=idempotency_key,
        amount=abs(Decimal(str(amount))),
        net_profit=net_profit,
    )


# -------------------------------------------------
# EXECUTE
# -------------------------------------------------


def run_task(task: ReconciliationTask, *, ledger: CapitalLedger | None = None) -> LedgerSnapshot:
    ledger = ledger or CapitalLedger()

    if task.kind == Kind.STOCK_ADDED:
        return ledger.reconcile_after_stock_addition(task.amount)

    if task.kind == Kind.STOCK_ENTRY_DELETED:
        return ledger.reconcile_after_stock_deletion(
            task.value_removed,
            is_last_entry=task.is_last_entry,
        )

    if task.kind == Kind.SALE_RECORDED:
        return ledger.reconcile_after_sale(task.amount, task.net_profit)

    if task.kind == Kind.SALE_REVERSED:
        return ledger.reconcile_after_sale(-abs(task.amount), task.net_profit)

    raise LedgerServiceError(f"Unknown reconciliation task kind: {task.kind}")


def process_task(task_id: int, *, ledger: CapitalLedger | None = None) -> bool:
    """
    Run one task inside its own error boundary.
    Returns True when the task reached DONE.
    """
    with transaction.atomic():
        task = (
            ReconciliationTask.objects.select_for_update()
            .filter(pk=task_id, status__in=[Status.PENDING, Status.FAILED])
            .first()
        )
        if task is None:
            return False

        task.attempts += 1
        try:
            with transaction.atomic():
                snapshot = run_task(task, ledger=ledger)
        except (LedgerServiceError, DatabaseError) as exc:
            task.last_error = str(exc)[:2000]
            task.status = (
                Status.FAILED if task.attempts >= conf.task_max_attempts() else Status.PENDING
            )
            task.save(update_fields=["attempts", "last_error", "status"])
            logger.exception(
                "Ledger reconciliation failed",
                extra={"task_id": task.pk, "kind": task.kind, "attempts": task.attempts},
            )
            return False

        task.status = Status.DONE
        task.last_error = ""
        task.processed_at = timezone.now()
        task.save(update_fields=["attempts", "last_error", "status", "processed_at"])

    logger.info(
        "Ledger reconciliation done",
        extra={"task_id": task.pk, "kind": task.kind, "version": snapshot.version},
    )
    return True


def process_pending_tasks(
    *,
    ledger: CapitalLedger | None = None,
    include_failed: bool = False,
) -> ProcessingReport:
    statuses = [Status.PENDING, Status.FAILED] if include_failed else [Status.PENDING]
    task_ids = list(
        ReconciliationTask.objects.filter(status__in=statuses)
        .order_by("created_at", "id")
        .values_list("id", flat=True)
    )

    processed = failed = skipped = 0
    for task_id in task_ids:
        try:
            done = process_task(task_id, ledger=ledger)
        except DatabaseError:
            logger.exception("Ledger task bookkeeping failed", extra={"task_id": task_id})
            failed += 1
            continue

        if done:
            processed += 1
        elif ReconciliationTask.objects.filter(pk=task_id, status=Status.DONE).exists():
            skipped += 1
        else:
            failed += 1

    return ProcessingReport(processed=processed, failed=failed, skipped=skipped)
