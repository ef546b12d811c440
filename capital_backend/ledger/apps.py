# ledger/apps.py

"""
LEDGER APP CONFIG

Capital management core:
- Singleton capital ledger record (cash / stock value / investment / profit)
- Reconciliation rules + optimistic-concurrency writes
- Outbox of post-commit reconciliation tasks
- Two-phase cash withdrawals
"""

from django.apps import AppConfig


class LedgerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ledger"
    verbose_name = "Capital Ledger"
