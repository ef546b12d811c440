# ledger/services/withdrawals.py

"""
======================================================
PATH: ledger/services/withdrawals.py
======================================================
CASH WITHDRAWALS (TAKE PROFIT)

Two-phase flow:
1) propose_withdrawal  validates 0 < amount <= cash_in_hand, stores PROPOSED
2) confirm_withdrawal  re-validates against the CURRENT cash, reduces the
                       ledger, records previous/new cash, marks COMPLETED
   cancel_withdrawal   marks CANCELLED, ledger untouched

A failed confirmation leaves the withdrawal PROPOSED and the ledger unchanged.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from ledger.models import CashWithdrawal
from ledger.services import rules
from ledger.services.capital_ledger import CapitalLedger
from ledger.services.exceptions import WithdrawalNotFoundError, WithdrawalStateError

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def _locked_withdrawal(withdrawal_id) -> CashWithdrawal:
    withdrawal = CashWithdrawal.objects.select_for_update().filter(pk=withdrawal_id).first()
    if withdrawal is None:
        raise WithdrawalNotFoundError(f"Withdrawal {withdrawal_id} not found")
    return withdrawal


def propose_withdrawal(
    *,
    amount,
    user=None,
    notes: str = "",
    ledger: CapitalLedger | None = None,
) -> CashWithdrawal:
    ledger = ledger or CapitalLedger()
    snapshot = ledger.get_snapshot()
    amount = rules.validate_withdrawal_amount(amount, cash_in_hand=snapshot.cash_in_hand)

    withdrawal = CashWithdrawal.objects.create(
        amount=amount,
        requested_by=user if getattr(user, "is_authenticated", False) else None,
        notes=(notes or "").strip(),
    )

    logger.info(
        "Withdrawal proposed",
        extra={"withdrawal_id": str(withdrawal.id), "amount": str(amount)},
    )
    return withdrawal


@transaction.atomic
def confirm_withdrawal(
    *,
    withdrawal_id,
    user=None,
    ledger: CapitalLedger | None = None,
) -> CashWithdrawal:
    ledger = ledger or CapitalLedger()
    withdrawal = _locked_withdrawal(withdrawal_id)

    if withdrawal.status != CashWithdrawal.Status.PROPOSED:
        raise WithdrawalStateError(
            f"Only PROPOSED withdrawals can be confirmed (current: {withdrawal.status})"
        )

    after = ledger.withdraw_cash(withdrawal.amount)

    withdrawal.status = CashWithdrawal.Status.COMPLETED
    withdrawal.previous_cash_in_hand = after.cash_in_hand + withdrawal.amount
    withdrawal.new_cash_in_hand = after.cash_in_hand
    withdrawal.confirmed_by = user if getattr(user, "is_authenticated", False) else None
    withdrawal.confirmed_at = timezone.now()
    withdrawal.save(
        update_fields=[
            "status",
            "previous_cash_in_hand",
            "new_cash_in_hand",
            "confirmed_by",
            "confirmed_at",
        ]
    )

    logger.info(
        "Withdrawal completed",
        extra={
            "withdrawal_id": str(withdrawal.id),
            "amount": str(withdrawal.amount),
            "new_cash_in_hand": str(withdrawal.new_cash_in_hand),
        },
    )
    return withdrawal


@transaction.atomic
def cancel_withdrawal(*, withdrawal_id, user=None) -> CashWithdrawal:
    withdrawal = _locked_withdrawal(withdrawal_id)

    if withdrawal.status != CashWithdrawal.Status.PROPOSED:
        raise WithdrawalStateError(
            f"Only PROPOSED withdrawals can be cancelled (current: {withdrawal.status})"
        )

    withdrawal.status = CashWithdrawal.Status.CANCELLED
    withdrawal.cancelled_at = timezone.now()
    withdrawal.save(update_fields=["status", "cancelled_at"])

    logger.info("Withdrawal cancelled", extra={"withdrawal_id": str(withdrawal.id)})
    return withdrawal


def get_withdrawal_summary(*, limit: int = 10) -> dict:
    completed = CashWithdrawal.objects.filter(status=CashWithdrawal.Status.COMPLETED)
    totals = completed.aggregate(total=Sum("amount"), count=Count("id"))

    return {
        "total_withdrawn": totals["total"] or ZERO,
        "completed_count": totals["count"] or 0,
        "pending_count": CashWithdrawal.objects.filter(
            status=CashWithdrawal.Status.PROPOSED
        ).count(),
        "recent": list(completed.order_by("-confirmed_at", "-created_at")[: max(0, int(limit))]),
    }
