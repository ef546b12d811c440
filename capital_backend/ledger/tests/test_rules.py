# ledger/tests/test_rules.py

from decimal import Decimal

from django.test import SimpleTestCase

from ledger.services import rules
from ledger.services.exceptions import WithdrawalValidationError
from ledger.services.rules import LedgerSnapshot

D = Decimal


def snap(cash="200000.00", stock="0.00", invest="200000.00", profit="0.00", version=1):
    return LedgerSnapshot(
        cash_in_hand=D(cash),
        total_stock_value=D(stock),
        total_investment=D(invest),
        total_profit=D(profit),
        version=version,
    )


class StockAdditionRuleTests(SimpleTestCase):
    """
    GUARANTEES:
    - Buying stock moves cash into stock value
    - Investment is a high-water mark of stock value
    - A non-positive delta only resyncs stock value
    """

    def test_positive_delta_moves_cash_into_stock(self):
        update = rules.apply_stock_addition(snap(), D("5000"))

        self.assertEqual(update.path, rules.PATH_STOCK_ADDED)
        self.assertEqual(update.fields["cash_in_hand"], D("195000.00"))
        self.assertEqual(update.fields["total_stock_value"], D("5000.00"))
        self.assertEqual(update.fields["total_investment"], D("200000.00"))
        self.assertNotIn("total_profit", update.fields)

    def test_investment_rises_when_stock_value_exceeds_it(self):
        update = rules.apply_stock_addition(
            snap(cash="1000", stock="0", invest="1000"), D("3000")
        )

        self.assertEqual(update.fields["total_investment"], D("3000.00"))

    def test_recorded_value_is_spent_even_when_stock_moved_since(self):
        # 5000 bought, 1200 of it already sold when the addition is applied
        update = rules.apply_stock_addition(snap(), D("3800"), value_added=D("5000"))

        self.assertEqual(update.path, rules.PATH_STOCK_ADDED)
        self.assertEqual(update.fields["cash_in_hand"], D("195000.00"))
        self.assertEqual(update.fields["total_stock_value"], D("3800.00"))
        self.assertEqual(update.fields["total_investment"], D("200000.00"))

    def test_zero_recorded_value_is_resync_only(self):
        update = rules.apply_stock_addition(snap(), D("100"), value_added=D("0"))

        self.assertEqual(update.path, rules.PATH_RESYNC)

    def test_zero_or_negative_delta_is_resync_only(self):
        for live in (D("5000"), D("4000")):
            update = rules.apply_stock_addition(snap(cash="195000", stock="5000"), live)
            self.assertEqual(update.path, rules.PATH_RESYNC)
            self.assertEqual(update.fields, {"total_stock_value": live.quantize(D("0.01"))})

    def test_cash_is_clamped_at_zero(self):
        update = rules.apply_stock_addition(snap(cash="100", stock="0", invest="100"), D("500"))

        self.assertEqual(update.fields["cash_in_hand"], D("0.00"))
        self.assertEqual(update.clamped, ("cash_in_hand",))


class StockDeletionRuleTests(SimpleTestCase):
    def test_explicit_value_returns_cash(self):
        update = rules.apply_stock_deletion(
            snap(cash="196200", stock="3800"), D("3000"), value_removed=D("800")
        )

        self.assertEqual(update.path, rules.PATH_STOCK_ENTRY_DELETED)
        self.assertEqual(update.fields["cash_in_hand"], D("197000.00"))
        self.assertEqual(update.fields["total_stock_value"], D("3000.00"))
        self.assertNotIn("total_investment", update.fields)
        self.assertNotIn("total_profit", update.fields)

    def test_negative_explicit_value_uses_magnitude(self):
        update = rules.apply_stock_deletion(
            snap(cash="100", stock="50"), D("0"), value_removed=D("-50")
        )

        self.assertEqual(update.fields["cash_in_hand"], D("150.00"))

    def test_inferred_value_from_stock_drop(self):
        update = rules.apply_stock_deletion(snap(cash="100", stock="500"), D("200"))

        self.assertEqual(update.path, rules.PATH_STOCK_DELETION_INFERRED)
        self.assertEqual(update.fields["cash_in_hand"], D("400.00"))
        self.assertEqual(update.fields["total_stock_value"], D("200.00"))

    def test_inferred_without_drop_is_resync(self):
        update = rules.apply_stock_deletion(snap(cash="100", stock="500"), D("600"))

        self.assertEqual(update.path, rules.PATH_RESYNC)

    def test_last_entry_collapses_to_baseline(self):
        update = rules.apply_stock_deletion(
            snap(cash="12.34", stock="999", invest="250000", profit="-40"),
            D("999"),
            value_removed=D("10"),
            is_last_entry=True,
            baseline=D("200000"),
        )

        self.assertEqual(update.path, rules.PATH_LAST_ENTRY_RESET)
        self.assertEqual(
            update.fields,
            {
                "cash_in_hand": D("200000.00"),
                "total_stock_value": D("0.00"),
                "total_investment": D("200000.00"),
                "total_profit": D("0.00"),
            },
        )


class SaleRuleTests(SimpleTestCase):
    def test_sale_with_positive_profit(self):
        update = rules.apply_sale(
            snap(cash="195000", stock="5000"), D("3800"), amount=D("1200"), net_profit=D("300")
        )

        self.assertEqual(update.path, rules.PATH_SALE_RECORDED)
        self.assertEqual(update.fields["cash_in_hand"], D("196200.00"))
        self.assertEqual(update.fields["total_stock_value"], D("3800.00"))
        self.assertEqual(update.fields["total_profit"], D("300.00"))
        self.assertNotIn("total_investment", update.fields)

    def test_sale_without_positive_profit_falls_back_to_amount(self):
        for profit in (None, D("0"), D("-25")):
            update = rules.apply_sale(snap(), D("0"), amount=D("100"), net_profit=profit)
            self.assertEqual(update.fields["total_profit"], D("100.00"))

    def test_reversal_mirrors_sale(self):
        update = rules.apply_sale(
            snap(cash="196200", stock="3800", profit="300"),
            D("5000"),
            amount=D("-1200"),
            net_profit=D("300"),
        )

        self.assertEqual(update.path, rules.PATH_SALE_REVERSED)
        self.assertEqual(update.fields["cash_in_hand"], D("195000.00"))
        self.assertEqual(update.fields["total_profit"], D("0.00"))
        self.assertEqual(update.fields["total_stock_value"], D("5000.00"))

    def test_reversal_without_profit_uses_amount(self):
        update = rules.apply_sale(snap(profit="500"), D("0"), amount=D("-200"))

        self.assertEqual(update.fields["total_profit"], D("300.00"))

    def test_reversal_clamps_cash_but_not_profit(self):
        update = rules.apply_sale(snap(cash="50", profit="0"), D("0"), amount=D("-80"))

        self.assertEqual(update.fields["cash_in_hand"], D("0.00"))
        self.assertEqual(update.fields["total_profit"], D("-80.00"))
        self.assertIn("cash_in_hand", update.clamped)

    def test_inferred_sale_uses_stock_drop_for_cash_and_profit(self):
        update = rules.apply_sale(snap(cash="1000", stock="500", profit="10"), D("300"))

        self.assertEqual(update.path, rules.PATH_SALE_INFERRED)
        self.assertEqual(update.fields["cash_in_hand"], D("1200.00"))
        self.assertEqual(update.fields["total_profit"], D("210.00"))

    def test_inferred_sale_without_drop_is_resync(self):
        update = rules.apply_sale(snap(stock="500"), D("500"))

        self.assertEqual(update.path, rules.PATH_RESYNC)


class RefreshRuleTests(SimpleTestCase):
    def test_refresh_dispatches_on_delta_sign(self):
        self.assertEqual(
            rules.apply_refresh(snap(stock="100"), D("150")).path, rules.PATH_STOCK_ADDED
        )
        self.assertEqual(
            rules.apply_refresh(snap(stock="100"), D("50")).path, rules.PATH_SALE_INFERRED
        )
        self.assertEqual(rules.apply_refresh(snap(stock="100"), D("100")).path, rules.PATH_RESYNC)


class WithdrawalRuleTests(SimpleTestCase):
    def test_valid_withdrawal_reduces_cash_only(self):
        update = rules.apply_withdrawal(snap(cash="196200"), D("50000"))

        self.assertEqual(update.fields, {"cash_in_hand": D("146200.00")})

    def test_full_cash_withdrawal_is_allowed(self):
        update = rules.apply_withdrawal(snap(cash="100"), "100")

        self.assertEqual(update.fields["cash_in_hand"], D("0.00"))

    def test_invalid_amounts_are_rejected(self):
        for amount in ("0", "-1", "200000.01", "abc", None, "NaN", "Infinity", "-Infinity"):
            with self.assertRaises(WithdrawalValidationError):
                rules.apply_withdrawal(snap(cash="200000"), amount)

    def test_not_a_number_is_a_validation_error(self):
        with self.assertRaises(WithdrawalValidationError):
            rules.validate_withdrawal_amount("NaN", cash_in_hand=D("100"))
