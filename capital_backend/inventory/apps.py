# inventory/apps.py

"""
INVENTORY APP CONFIG

Retail (piece) + wholesale (packet) stock, the stock entry log and the
live stock valuation used by the capital ledger.
"""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
    verbose_name = "Inventory"
