# ledger/tests/test_withdrawals.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings

from ledger.models import CashWithdrawal
from ledger.services.capital_ledger import CapitalLedger
from ledger.services.exceptions import (
    WithdrawalNotFoundError,
    WithdrawalStateError,
    WithdrawalValidationError,
)
from ledger.services.withdrawals import (
    cancel_withdrawal,
    confirm_withdrawal,
    get_withdrawal_summary,
    propose_withdrawal,
)

User = get_user_model()
D = Decimal


@override_settings(CAPITAL_LEDGER={"INITIAL_CAPITAL": "196200.00"})
class WithdrawalFlowTests(TestCase):
    """
    GUARANTEES:
    - propose validates but never moves cash
    - confirm moves exactly `amount` and records before / after
    - cancel and failed confirms leave the ledger untouched
    """

    def setUp(self):
        self.owner = User.objects.create_user(
            email="owner@example.com",
            password="pass1234",
            role="admin",
        )
        self.ledger = CapitalLedger(valuation=lambda: D("0.00"))

    def test_propose_then_confirm(self):
        withdrawal = propose_withdrawal(amount="50000", user=self.owner, ledger=self.ledger)

        self.assertEqual(withdrawal.status, CashWithdrawal.Status.PROPOSED)
        self.assertEqual(self.ledger.get_snapshot().cash_in_hand, D("196200.00"))

        confirmed = confirm_withdrawal(
            withdrawal_id=withdrawal.id, user=self.owner, ledger=self.ledger
        )

        self.assertEqual(confirmed.status, CashWithdrawal.Status.COMPLETED)
        self.assertEqual(confirmed.previous_cash_in_hand, D("196200.00"))
        self.assertEqual(confirmed.new_cash_in_hand, D("146200.00"))
        self.assertEqual(confirmed.confirmed_by, self.owner)
        self.assertEqual(self.ledger.get_snapshot().cash_in_hand, D("146200.00"))

    def test_propose_rejects_out_of_bounds_amounts(self):
        for amount in ("0", "-5", "200000", "not-a-number", "NaN"):
            with self.assertRaises(WithdrawalValidationError):
                propose_withdrawal(amount=amount, ledger=self.ledger)

        self.assertFalse(CashWithdrawal.objects.exists())
        self.assertEqual(self.ledger.get_snapshot().cash_in_hand, D("196200.00"))

    def test_confirm_revalidates_against_current_cash(self):
        first = propose_withdrawal(amount="150000", ledger=self.ledger)
        second = propose_withdrawal(amount="150000", ledger=self.ledger)
        confirm_withdrawal(withdrawal_id=first.id, ledger=self.ledger)

        with self.assertRaises(WithdrawalValidationError):
            confirm_withdrawal(withdrawal_id=second.id, ledger=self.ledger)

        second.refresh_from_db()
        self.assertEqual(second.status, CashWithdrawal.Status.PROPOSED)
        self.assertEqual(self.ledger.get_snapshot().cash_in_hand, D("46200.00"))

    def test_cancel_is_terminal(self):
        withdrawal = propose_withdrawal(amount="10", ledger=self.ledger)
        cancel_withdrawal(withdrawal_id=withdrawal.id)

        with self.assertRaises(WithdrawalStateError):
            confirm_withdrawal(withdrawal_id=withdrawal.id, ledger=self.ledger)
        with self.assertRaises(WithdrawalStateError):
            cancel_withdrawal(withdrawal_id=withdrawal.id)

        self.assertEqual(self.ledger.get_snapshot().cash_in_hand, D("196200.00"))

    def test_unknown_withdrawal(self):
        with self.assertRaises(WithdrawalNotFoundError):
            confirm_withdrawal(
                withdrawal_id="00000000-0000-0000-0000-000000000000", ledger=self.ledger
            )

    def test_summary_reports_latest_completed(self):
        for amount in ("10", "20", "30"):
            w = propose_withdrawal(amount=amount, ledger=self.ledger)
            confirm_withdrawal(withdrawal_id=w.id, ledger=self.ledger)
        propose_withdrawal(amount="5", ledger=self.ledger)

        summary = get_withdrawal_summary(limit=2)

        self.assertEqual(summary["total_withdrawn"], D("60.00"))
        self.assertEqual(summary["completed_count"], 3)
        self.assertEqual(summary["pending_count"], 1)
        self.assertEqual(len(summary["recent"]), 2)
        self.assertEqual(summary["recent"][0].amount, D("30.00"))
