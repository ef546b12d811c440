# sales/apps.py

"""
SALES APP CONFIG

Customers + retail / wholesale sale transactions. Every recorded or
reversed sale adjusts stock and enqueues a capital ledger reconciliation.
"""

from django.apps import AppConfig


class SalesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sales"
    verbose_name = "Sales"
