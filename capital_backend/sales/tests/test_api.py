# sales/tests/test_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from inventory.models import StockItem, StockType
from sales.models import Customer, SaleTransaction

User = get_user_model()
D = Decimal


@override_settings(CAPITAL_LEDGER={"INITIAL_CAPITAL": "200000.00", "WHOLESALE_PIECES_PER_PACKET": 20})
class SalesAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.cashier = User.objects.create_user(
            email="cashier@example.com", password="pass1234", role="cashier"
        )
        self.manager = User.objects.create_user(
            email="manager@example.com", password="pass1234", role="manager"
        )
        self.item = StockItem.objects.create(
            stock_type=StockType.RETAIL,
            item_type="Airtime Card",
            variation_name="30-26",
            quantity=5,
            unit_price=D("26.00"),
        )

    def _sale_payload(self, **overrides):
        payload = {
            "sale_type": "RETAIL",
            "item_type": "Airtime Card",
            "variation_name": "30-26",
            "quantity": 2,
            "selling_price_per_unit": "30.00",
        }
        payload.update(overrides)
        return payload

    def test_cashier_records_sale(self):
        self.client.force_authenticate(user=self.cashier)

        response = self.client.post(
            reverse("sale-transactions-list"), self._sale_payload(), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(D(response.data["total_amount"]), D("60.00"))
        self.assertEqual(D(response.data["net_profit"]), D("8.00"))
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 3)

    def test_oversell_returns_conflict(self):
        self.client.force_authenticate(user=self.cashier)

        response = self.client.post(
            reverse("sale-transactions-list"), self._sale_payload(quantity=6), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_unknown_item_returns_not_found(self):
        self.client.force_authenticate(user=self.cashier)

        response = self.client.post(
            reverse("sale-transactions-list"),
            self._sale_payload(variation_name="nope_1"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_cashier_cannot_reverse(self):
        self.client.force_authenticate(user=self.cashier)
        created = self.client.post(
            reverse("sale-transactions-list"), self._sale_payload(), format="json"
        )

        response = self.client.delete(
            reverse("sale-transactions-detail", kwargs={"pk": created.data["id"]})
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_reverses_sale(self):
        self.client.force_authenticate(user=self.manager)
        created = self.client.post(
            reverse("sale-transactions-list"), self._sale_payload(), format="json"
        )

        response = self.client.delete(
            reverse("sale-transactions-detail", kwargs={"pk": created.data["id"]})
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], SaleTransaction.STATUS_REVERSED)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 5)

        again = self.client.delete(
            reverse("sale-transactions-detail", kwargs={"pk": created.data["id"]})
        )
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT)

    def test_summary_counts_completed_sales_only(self):
        self.client.force_authenticate(user=self.manager)
        first = self.client.post(
            reverse("sale-transactions-list"), self._sale_payload(), format="json"
        )
        self.client.post(
            reverse("sale-transactions-list"), self._sale_payload(quantity=1), format="json"
        )
        self.client.delete(reverse("sale-transactions-detail", kwargs={"pk": first.data["id"]}))

        response = self.client.get(reverse("sale-transactions-summary"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(D(response.data["total_amount"]), D("30.00"))

    def test_customers_crud(self):
        self.client.force_authenticate(user=self.cashier)

        created = self.client.post(
            reverse("customers-list"),
            {"name": "  Mama Nkechi  ", "phone_number": "0800000000", "customer_type": "WHOLESALE"},
            format="json",
        )
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertEqual(created.data["name"], "Mama Nkechi")

        listed = self.client.get(reverse("customers-list"), {"search": "Nkechi"})
        self.assertEqual(listed.data["count"], 1)

        self.assertTrue(Customer.objects.filter(customer_type="WHOLESALE").exists())

    def test_sale_with_customer(self):
        customer = Customer.objects.create(name="Corner Shop")
        self.client.force_authenticate(user=self.cashier)

        response = self.client.post(
            reverse("sale-transactions-list"),
            self._sale_payload(customer=str(customer.id)),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["customer_name"], "Corner Shop")
