# inventory/tests/test_valuation.py

from decimal import Decimal

from django.test import SimpleTestCase, TestCase, override_settings

from inventory.models import StockItem, StockType
from inventory.services.valuation import (
    get_aggregate_stock_value,
    get_stock_valuation,
    parse_unit_price,
)

D = Decimal


class ParseUnitPriceTests(SimpleTestCase):
    def test_last_hyphen_segment(self):
        self.assertEqual(parse_unit_price("30-26"), D("26.00"))

    def test_last_underscore_segment(self):
        self.assertEqual(parse_unit_price("stamp_50"), D("50.00"))

    def test_plain_number(self):
        self.assertEqual(parse_unit_price("26"), D("26.00"))
        self.assertEqual(parse_unit_price(" 12.5 "), D("12.50"))

    def test_unparseable_labels(self):
        for label in ("", None, "blue", "30-", "stamp_x", "nan", "inf"):
            self.assertIsNone(parse_unit_price(label), label)


@override_settings(CAPITAL_LEDGER={"WHOLESALE_PIECES_PER_PACKET": 20})
class StockValuationTests(TestCase):
    """
    GUARANTEES:
    - Retail value = unit_price * pieces
    - Wholesale value = unit_price * packets * pieces_per_packet
    - Empty inventory is worth exactly zero
    """

    def test_empty_inventory_is_zero(self):
        self.assertEqual(get_aggregate_stock_value(), D("0.00"))

    def test_retail_and_wholesale_are_summed(self):
        StockItem.objects.create(
            stock_type=StockType.RETAIL,
            item_type="Card",
            variation_name="30-26",
            quantity=10,
            unit_price=D("26.00"),
        )
        StockItem.objects.create(
            stock_type=StockType.WHOLESALE,
            item_type="Card",
            variation_name="30-26",
            quantity=3,
            unit_price=D("26.00"),
        )

        valuation = get_stock_valuation()

        self.assertEqual(valuation.retail_value, D("260.00"))
        self.assertEqual(valuation.wholesale_value, D("1560.00"))
        self.assertEqual(valuation.total_value, D("1820.00"))
        self.assertEqual(get_aggregate_stock_value(), D("1820.00"))

    @override_settings(CAPITAL_LEDGER={"WHOLESALE_PIECES_PER_PACKET": 500})
    def test_pack_size_is_configurable(self):
        StockItem.objects.create(
            stock_type=StockType.WHOLESALE,
            item_type="Envelope",
            variation_name="env_0.10",
            quantity=2,
            unit_price=D("0.10"),
        )

        self.assertEqual(get_aggregate_stock_value(), D("100.00"))

    def test_valuation_is_a_single_aggregate_query(self):
        for n in range(5):
            StockItem.objects.create(
                stock_type=StockType.RETAIL if n % 2 else StockType.WHOLESALE,
                item_type="Card",
                variation_name=f"card_{n}",
                quantity=n + 1,
                unit_price=D("1.25"),
            )

        with self.assertNumQueries(1):
            total = get_aggregate_stock_value()

        # retail: (2 + 4) * 1.25, wholesale: (1 + 3 + 5) * 1.25 * 20
        self.assertEqual(total, D("232.50"))
