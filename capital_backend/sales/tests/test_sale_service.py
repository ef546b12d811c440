# sales/tests/test_sale_service.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase, override_settings

from inventory.models import StockItem, StockType
from inventory.services.exceptions import InsufficientStockError, StockItemNotFoundError
from inventory.services.stock_service import add_stock
from ledger.services.capital_ledger import CapitalLedger
from sales.models import Customer, SaleTransaction
from sales.services.exceptions import SaleAlreadyReversedError, SaleNotFoundError
from sales.services.sale_service import compute_sale_amounts, record_sale, reverse_sale

User = get_user_model()
D = Decimal


class SaleAmountTests(SimpleTestCase):
    def test_retail_amounts(self):
        amounts = compute_sale_amounts(
            quantity=5, pieces_per_unit=1, selling_price_per_unit=D("30"), cogs_per_piece=D("26")
        )

        self.assertEqual(amounts.total_amount, D("150.00"))
        self.assertEqual(amounts.cogs_amount, D("130.00"))
        self.assertEqual(amounts.net_profit, D("20.00"))

    def test_wholesale_cogs_counts_pieces_per_packet(self):
        amounts = compute_sale_amounts(
            quantity=2, pieces_per_unit=20, selling_price_per_unit=D("560"), cogs_per_piece=D("26")
        )

        self.assertEqual(amounts.total_amount, D("1120.00"))
        self.assertEqual(amounts.cogs_amount, D("1040.00"))
        self.assertEqual(amounts.net_profit, D("80.00"))


@override_settings(
    CAPITAL_LEDGER={
        "INITIAL_CAPITAL": "200000.00",
        "WHOLESALE_PIECES_PER_PACKET": 20,
        "AUTO_PROCESS_TASKS": True,
    }
)
class SaleServiceTests(TestCase):
    """
    Sales against real stock + the capital ledger.

    GUARANTEES:
    - A sale decrements stock and credits cash / profit
    - Overselling is refused with no side effects
    - Reversal restores stock, cash and profit exactly
    """

    def setUp(self):
        self.cashier = User.objects.create_user(
            email="cashier@example.com",
            password="pass",
            role="cashier",
        )
        self.customer = Customer.objects.create(name="Corner Shop", customer_type="WHOLESALE")

        with self.captureOnCommitCallbacks(execute=True):
            add_stock(
                stock_type=StockType.RETAIL,
                item_type="Airtime Card",
                variation_name="30-26",
                quantity=100,
            )
            add_stock(
                stock_type=StockType.WHOLESALE,
                item_type="Airtime Card",
                variation_name="30-26",
                quantity=10,
            )
        # 100 * 26 + 10 * 20 * 26 = 7800
        self.start = CapitalLedger().get_snapshot()

    def _sell(self, **overrides):
        kwargs = {
            "sale_type": StockType.RETAIL,
            "item_type": "Airtime Card",
            "variation_name": "30-26",
            "quantity": 10,
            "selling_price_per_unit": "30.00",
            "user": self.cashier,
        }
        kwargs.update(overrides)
        with self.captureOnCommitCallbacks(execute=True):
            return record_sale(**kwargs)

    def test_setup_ledger_state(self):
        self.assertEqual(self.start.total_stock_value, D("7800.00"))
        self.assertEqual(self.start.cash_in_hand, D("192200.00"))

    def test_retail_sale_updates_stock_and_ledger(self):
        sale = self._sell()

        self.assertEqual(sale.total_amount, D("300.00"))
        self.assertEqual(sale.cogs_amount, D("260.00"))
        self.assertEqual(sale.net_profit, D("40.00"))
        self.assertEqual(sale.recorded_by, self.cashier)
        self.assertEqual(
            StockItem.objects.get(stock_type=StockType.RETAIL, variation_name="30-26").quantity, 90
        )

        snapshot = CapitalLedger().get_snapshot()
        self.assertEqual(snapshot.cash_in_hand, D("192500.00"))
        self.assertEqual(snapshot.total_stock_value, D("7540.00"))
        self.assertEqual(snapshot.total_profit, D("40.00"))
        self.assertEqual(snapshot.total_investment, self.start.total_investment)

    def test_wholesale_sale_uses_packets(self):
        sale = self._sell(
            sale_type=StockType.WHOLESALE,
            quantity=2,
            selling_price_per_unit="560.00",
            customer=self.customer,
        )

        self.assertEqual(sale.pieces_per_unit, 20)
        self.assertEqual(sale.cogs_amount, D("1040.00"))
        self.assertEqual(sale.customer, self.customer)
        self.assertEqual(CapitalLedger().get_snapshot().total_stock_value, D("6760.00"))

    def test_loss_making_sale_credits_amount_as_profit(self):
        sale = self._sell(selling_price_per_unit="20.00")

        self.assertEqual(sale.net_profit, D("-60.00"))
        self.assertEqual(CapitalLedger().get_snapshot().total_profit, D("200.00"))

    def test_oversell_is_refused(self):
        with self.assertRaises(InsufficientStockError):
            self._sell(quantity=101)

        self.assertFalse(SaleTransaction.objects.exists())
        self.assertEqual(StockItem.objects.get(stock_type=StockType.RETAIL).quantity, 100)
        self.assertEqual(CapitalLedger().get_snapshot().cash_in_hand, self.start.cash_in_hand)

    def test_unknown_item(self):
        with self.assertRaises(StockItemNotFoundError):
            self._sell(variation_name="99-90")

    def test_reversal_restores_everything(self):
        for price in ("30.00", "20.00"):
            sale = self._sell(selling_price_per_unit=price)
            with self.captureOnCommitCallbacks(execute=True):
                reversed_sale = reverse_sale(sale_id=sale.id, user=self.cashier)

            self.assertEqual(reversed_sale.status, SaleTransaction.STATUS_REVERSED)
            self.assertIsNotNone(reversed_sale.reversed_at)

            snapshot = CapitalLedger().get_snapshot()
            self.assertEqual(snapshot.cash_in_hand, self.start.cash_in_hand)
            self.assertEqual(snapshot.total_profit, self.start.total_profit)
            self.assertEqual(snapshot.total_stock_value, self.start.total_stock_value)

        self.assertEqual(StockItem.objects.get(stock_type=StockType.RETAIL).quantity, 100)

    def test_reversal_is_once_only(self):
        sale = self._sell()
        reverse_sale(sale_id=sale.id)

        with self.assertRaises(SaleAlreadyReversedError):
            reverse_sale(sale_id=sale.id)

    def test_reverse_unknown_sale(self):
        with self.assertRaises(SaleNotFoundError):
            reverse_sale(sale_id="00000000-0000-0000-0000-000000000000")
