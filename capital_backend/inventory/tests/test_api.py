# inventory/tests/test_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from inventory.models import StockEntry, StockItem, StockType

User = get_user_model()
D = Decimal


@override_settings(CAPITAL_LEDGER={"INITIAL_CAPITAL": "200000.00", "WHOLESALE_PIECES_PER_PACKET": 20})
class InventoryAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.keeper = User.objects.create_user(
            email="keeper@example.com", password="pass1234", role="stock_keeper"
        )
        self.viewer = User.objects.create_user(
            email="viewer@example.com", password="pass1234", role="viewer"
        )

    def _post_entry(self, payload):
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post(reverse("stock-entries-list"), payload, format="json")

    def test_stock_keeper_adds_stock(self):
        self.client.force_authenticate(user=self.keeper)

        response = self._post_entry(
            {
                "stock_type": "RETAIL",
                "item_type": "Airtime Card",
                "variation_name": "30-26",
                "quantity": 10,
            }
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(D(response.data["unit_price"]), D("26.00"))
        self.assertEqual(D(response.data["total_value"]), D("260.00"))
        self.assertEqual(StockItem.objects.get(variation_name="30-26").quantity, 10)

        snapshot = self.client.get(reverse("stock-valuation"))
        self.assertEqual(snapshot.status_code, status.HTTP_200_OK)
        self.assertEqual(D(snapshot.data["total_value"]), D("260.00"))

    def test_unpriced_label_is_rejected(self):
        self.client.force_authenticate(user=self.keeper)

        response = self._post_entry(
            {"stock_type": "RETAIL", "item_type": "Card", "variation_name": "Blue", "quantity": 1}
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("unit_price", response.data["detail"])

    def test_viewer_cannot_add_stock(self):
        self.client.force_authenticate(user=self.viewer)

        response = self.client.post(
            reverse("stock-entries-list"),
            {"stock_type": "RETAIL", "item_type": "Card", "variation_name": "x_1", "quantity": 1},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_viewer_can_list_items(self):
        StockItem.objects.create(
            stock_type=StockType.RETAIL,
            item_type="Card",
            variation_name="x_1",
            quantity=1,
            unit_price=D("1.00"),
        )
        self.client.force_authenticate(user=self.viewer)

        response = self.client.get(reverse("stock-items-list"), {"stock_type": "RETAIL"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)

    def test_low_stock_lists_items_at_or_below_threshold(self):
        StockItem.objects.create(
            stock_type=StockType.RETAIL,
            item_type="Card",
            variation_name="low_1",
            quantity=10,
            unit_price=D("1.00"),
        )
        StockItem.objects.create(
            stock_type=StockType.RETAIL,
            item_type="Card",
            variation_name="ok_1",
            quantity=11,
            unit_price=D("1.00"),
        )
        self.client.force_authenticate(user=self.viewer)

        response = self.client.get(reverse("stock-items-low-stock"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["variation_name"] for row in response.data], ["low_1"])

    def test_delete_entry(self):
        self.client.force_authenticate(user=self.keeper)
        created = self._post_entry(
            {"stock_type": "WHOLESALE", "item_type": "Card", "variation_name": "30-26", "quantity": 2}
        )

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.delete(
                reverse("stock-entries-detail", kwargs={"pk": created.data["id"]})
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(D(response.data["value_removed"]), D("1040.00"))
        self.assertTrue(response.data["is_last_entry"])
        self.assertFalse(StockEntry.objects.exists())

        missing = self.client.delete(reverse("stock-entries-detail", kwargs={"pk": created.data["id"]}))
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
