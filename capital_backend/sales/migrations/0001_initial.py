import uuid

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
            name="Customer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=150)),
                ("phone_number", models.CharField(blank=True, default="", max_length=32)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("address", models.CharField(blank=True, default="", max_length=255)),
                (
                    "customer_type",
                    models.CharField(
                        choices=[("RETAIL", "Retail"), ("WHOLESALE", "Wholesale")],
                        default="RETAIL",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["name"], name="sales_custo_name_5d0c3e_idx"),
                    models.Index(fields=["phone_number"], name="sales_custo_phone_n_8a7f12_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleTransaction",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "sale_type",
                    models.CharField(
                        choices=[("RETAIL", "Retail (pieces)"), ("WHOLESALE", "Wholesale (packets)")],
                        max_length=16,
                    ),
                ),
                ("item_type", models.CharField(max_length=128)),
                ("variation_name", models.CharField(max_length=128)),
                ("quantity", models.PositiveIntegerField()),
                ("pieces_per_unit", models.PositiveIntegerField(default=1)),
                (
                    "selling_price_per_unit",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Price per piece (retail) or per packet (wholesale).",
                        max_digits=12,
                    ),
                ),
                ("cogs_per_piece", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("cogs_amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("net_profit", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "status",
                    models.CharField(
                        choices=[("completed", "Completed"), ("reversed", "Reversed")],
                        default="completed",
                        max_length=16,
                    ),
                ),
                ("notes", models.CharField(blank=True, default="", max_length=255)),
                ("sold_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("reversed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="transactions",
                        to="sales.customer",
                    ),
                ),
                (
                    "recorded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="recorded_sales",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "reversed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reversed_sales",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-sold_at", "-created_at"],
                "indexes": [
                    models.Index(fields=["sale_type", "sold_at"], name="sales_sale_sale_ty_2c4e9b_idx"),
                    models.Index(fields=["status"], name="sales_sale_status_71d3aa_idx"),
                    models.Index(fields=["item_type", "variation_name"], name="sales_sale_item_ty_f05b62_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)),
                        name="chk_sale_qty_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("total_amount__gte", 0)),
                        name="chk_sale_total_gte_zero",
                    ),
                ],
            },
        ),
    ]
