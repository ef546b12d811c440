# users/tests/test_auth.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from permissions.roles import (
    CAP_LEDGER_WITHDRAW,
    CAP_SALES_RECORD,
    effective_capabilities_for,
    user_has_capability,
)

User = get_user_model()


class UserModelTests(TestCase):
    def test_username_is_derived_from_email(self):
        user = User.objects.create_user(email="Jane.Doe@Example.com", password="pass1234")

        self.assertEqual(user.username, "jane.doe")
        self.assertEqual(user.role, User.ROLE_VIEWER)

    def test_derived_usernames_are_unique(self):
        User.objects.create_user(email="sam@a.com", password="pass1234")
        second = User.objects.create_user(email="sam@b.com", password="pass1234")

        self.assertEqual(second.username, "sam2")

    def test_superuser_is_admin(self):
        admin = User.objects.create_superuser(email="root@example.com", password="pass1234")

        self.assertEqual(admin.role, User.ROLE_ADMIN)
        self.assertTrue(admin.is_staff)


class CapabilityTests(TestCase):
    """
    GUARANTEES:
    - Only admins may withdraw cash
    - Viewers are read-only
    - Superusers hold every capability
    """

    def test_role_capabilities(self):
        cashier = User.objects.create_user(email="c@example.com", password="x", role="cashier")
        manager = User.objects.create_user(email="m@example.com", password="x", role="manager")
        viewer = User.objects.create_user(email="v@example.com", password="x", role="viewer")

        self.assertTrue(user_has_capability(cashier, CAP_SALES_RECORD))
        self.assertFalse(user_has_capability(manager, CAP_LEDGER_WITHDRAW))
        self.assertFalse(user_has_capability(viewer, CAP_SALES_RECORD))

    def test_superuser_has_everything(self):
        root = User.objects.create_superuser(email="root@example.com", password="pass1234")
        root.role = User.ROLE_VIEWER
        root.save(update_fields=["role"])

        self.assertIn(CAP_LEDGER_WITHDRAW, effective_capabilities_for(root))


class AuthAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_register_creates_viewer(self):
        response = self.client.post(
            reverse("users:register"),
            {"email": "new@example.com", "password": "S3cure-pass!", "role": "admin"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["user"]["role"], User.ROLE_VIEWER)

    def test_login_returns_tokens_and_me_works(self):
        User.objects.create_user(email="clerk@example.com", password="S3cure-pass!", role="cashier")

        login = self.client.post(
            reverse("users:login"),
            {"email": "clerk@example.com", "password": "S3cure-pass!"},
            format="json",
        )
        self.assertEqual(login.status_code, status.HTTP_200_OK)
        self.assertIn("access", login.data)
        self.assertIn("refresh", login.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")
        me = self.client.get(reverse("users:me"))

        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data["user"]["email"], "clerk@example.com")
        self.assertEqual(me.data["user"]["role"], "cashier")

    def test_login_rejects_bad_password(self):
        User.objects.create_user(email="clerk@example.com", password="S3cure-pass!")

        response = self.client.post(
            reverse("users:login"),
            {"email": "clerk@example.com", "password": "wrong"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_me_requires_token(self):
        response = self.client.get(reverse("users:me"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_payload_lists_capabilities(self):
        User.objects.create_user(email="keeper@example.com", password="S3cure-pass!", role="stock_keeper")

        response = self.client.post(
            reverse("users:login"),
            {"email": "keeper@example.com", "password": "S3cure-pass!"},
            format="json",
        )

        self.assertEqual(
            response.data["user"]["capabilities"], ["inventory.edit", "inventory.view"]
        )


class StaffRoleAPITests(TestCase):
    """
    GUARANTEES:
    - Only holders of users.manage (admins) can list staff or change roles
    - A role change takes effect on the user's capabilities immediately
    - Nobody can change their own role
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="owner@example.com", password="x", role="admin")
        self.manager = User.objects.create_user(email="boss@example.com", password="x", role="manager")
        self.newcomer = User.objects.create_user(email="new@example.com", password="x")

    def test_admin_promotes_viewer_to_cashier(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.patch(
            reverse("users:staff-role", kwargs={"pk": self.newcomer.pk}),
            {"role": "cashier"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["role"], "cashier")
        self.assertIn(CAP_SALES_RECORD, response.data["capabilities"])
        self.newcomer.refresh_from_db()
        self.assertEqual(self.newcomer.role, User.ROLE_CASHIER)

    def test_manager_cannot_assign_roles(self):
        self.client.force_authenticate(user=self.manager)

        list_response = self.client.get(reverse("users:staff-list"))
        patch_response = self.client.patch(
            reverse("users:staff-role", kwargs={"pk": self.newcomer.pk}),
            {"role": "admin"},
            format="json",
        )

        self.assertEqual(list_response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(patch_response.status_code, status.HTTP_403_FORBIDDEN)
        self.newcomer.refresh_from_db()
        self.assertEqual(self.newcomer.role, User.ROLE_VIEWER)

    def test_admin_cannot_change_own_role(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.patch(
            reverse("users:staff-role", kwargs={"pk": self.admin.pk}),
            {"role": "viewer"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.role, User.ROLE_ADMIN)

    def test_unknown_role_is_rejected(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.patch(
            reverse("users:staff-role", kwargs={"pk": self.newcomer.pk}),
            {"role": "owner"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_staff_list_filters_by_role(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(reverse("users:staff-list"), {"role": "manager"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        emails = [row["email"] for row in response.data["results"]]
        self.assertEqual(emails, ["boss@example.com"])
