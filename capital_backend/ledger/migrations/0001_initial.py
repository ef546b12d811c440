import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CapitalLedgerRecord",
            fields=[
                (
                    "record_id",
                    models.CharField(
                        default="MAIN_RECORD",
                        editable=False,
                        max_length=32,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("cash_in_hand", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "total_stock_value",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Mirror of the live inventory valuation at the last reconciliation.",
                        max_digits=14,
                    ),
                ),
                (
                    "total_investment",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="High-water mark of capital put into the business.",
                        max_digits=14,
                    ),
                ),
                (
                    "total_profit",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14),
                ),
                ("version", models.PositiveIntegerField(default=1)),
                ("last_updated", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Capital Ledger Record",
                "verbose_name_plural": "Capital Ledger Records",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("cash_in_hand__gte", 0)),
                        name="chk_ledger_cash_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("total_stock_value__gte", 0)),
                        name="chk_ledger_stock_value_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("total_investment__gte", 0)),
                        name="chk_ledger_investment_gte_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReconciliationTask",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("STOCK_ADDED", "Stock added"),
                            ("STOCK_ENTRY_DELETED", "Stock entry deleted"),
                            ("SALE_RECORDED", "Sale recorded"),
                            ("SALE_REVERSED", "Sale reversed"),
                        ],
                        max_length=32,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("DONE", "Done"), ("FAILED", "Failed")],
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("amount", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("net_profit", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("value_removed", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("is_last_entry", models.BooleanField(default=False)),
                ("idempotency_key", models.CharField(blank=True, max_length=128, null=True, unique=True)),
                ("attempts", models.PositiveIntegerField(default=0)),
                ("last_error", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("processed_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="ledger_reco_status_6c1f0a_idx"),
                    models.Index(fields=["kind"], name="ledger_reco_kind_0e9b4d_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CashWithdrawal",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PROPOSED", "Proposed"),
                            ("COMPLETED", "Completed"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="PROPOSED",
                        max_length=16,
                    ),
                ),
                ("previous_cash_in_hand", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("new_cash_in_hand", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("notes", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "confirmed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="confirmed_withdrawals",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "requested_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="requested_withdrawals",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="ledger_cash_status_9a2e71_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="chk_withdrawal_amount_gt_zero",
                    ),
                ],
            },
        ),
    ]
