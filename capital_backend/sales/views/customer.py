"""
PATH: sales/views/customer.py

CUSTOMERS

GET  /api/sales/customers/          sales.view
POST /api/sales/customers/          customers.edit
PUT/PATCH/DELETE .../<id>/          customers.edit
"""

from __future__ import annotations

from rest_framework import viewsets
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAuthenticated
from django_filters.rest_framework import DjangoFilterBackend

from permissions.roles import CAP_CUSTOMERS_EDIT, CAP_SALES_VIEW, HasCapability
from sales.models import Customer
from sales.serializers import CustomerSerializer


class CustomerViewSet(viewsets.ModelViewSet):
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated]
    queryset = Customer.objects.all().order_by("name")
    lookup_value_regex = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"

    required_capability = None

    filter_backends = [DjangoFilterBackend, SearchFilter]
    filterset_fields = ["customer_type"]
    search_fields = ["name", "phone_number", "email"]

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            self.required_capability = CAP_SALES_VIEW
        else:
            self.required_capability = CAP_CUSTOMERS_EDIT
        return [IsAuthenticated(), HasCapability()]
