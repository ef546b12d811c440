# sales/models/customer.py

import uuid

from django.db import models


class Customer(models.Model):
    TYPE_RETAIL = "RETAIL"
    TYPE_WHOLESALE = "WHOLESALE"

    TYPE_CHOICES = [
        (TYPE_RETAIL, "Retail"),
        (TYPE_WHOLESALE, "Wholesale"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=150)
    phone_number = models.CharField(max_length=32, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.CharField(max_length=255, blank=True, default="")

    customer_type = models.CharField(
        max_length=16,
        choices=TYPE_CHOICES,
        default=TYPE_RETAIL,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="sales_custo_name_5d0c3e_idx"),
            models.Index(fields=["phone_number"], name="sales_custo_phone_n_8a7f12_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.customer_type})"
