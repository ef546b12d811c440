import uuid

import django.db.models.deletion
import inventory.models.stock_entry
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StockItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "stock_type",
                    models.CharField(
                        choices=[("RETAIL", "Retail (pieces)"), ("WHOLESALE", "Wholesale (packets)")],
                        max_length=16,
                    ),
                ),
                ("item_type", models.CharField(max_length=128)),
                ("variation_name", models.CharField(max_length=128)),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Pieces (retail) or packets (wholesale). Service-managed only.",
                    ),
                ),
                (
                    "unit_price",
                    models.DecimalField(decimal_places=2, help_text="Cost per piece.", max_digits=12),
                ),
                ("low_stock_threshold", models.PositiveIntegerField(default=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["stock_type", "item_type", "variation_name"],
                "indexes": [
                    models.Index(fields=["stock_type", "item_type"], name="inventory_s_stock_t_3b8f21_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("stock_type", "item_type", "variation_name"),
                        name="unique_stock_item_variation",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("unit_price__gte", 0)),
                        name="chk_stockitem_unit_price_gte_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockEntry",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("entry_date", models.DateField(default=inventory.models.stock_entry._local_date)),
                ("entry_time", models.TimeField(default=inventory.models.stock_entry._local_time)),
                (
                    "stock_type",
                    models.CharField(
                        choices=[("RETAIL", "Retail (pieces)"), ("WHOLESALE", "Wholesale (packets)")],
                        max_length=16,
                    ),
                ),
                ("item_type", models.CharField(max_length=128)),
                ("variation_name", models.CharField(max_length=128)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("quantity", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stock_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Stock entries",
                "ordering": ["-entry_date", "-entry_time", "-created_at"],
                "indexes": [
                    models.Index(fields=["entry_date"], name="inventory_s_entry_d_a41c07_idx"),
                    models.Index(
                        fields=["stock_type", "item_type", "variation_name"],
                        name="inventory_s_stock_t_e92d5a_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)),
                        name="chk_stockentry_qty_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("unit_price__gte", 0)),
                        name="chk_stockentry_unit_price_gte_zero",
                    ),
                ],
            },
        ),
    ]
