# ledger/models/__init__.py

"""
LEDGER MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Models never import services.
"""

from ledger.models.capital_ledger import MAIN_RECORD_ID, CapitalLedgerRecord
from ledger.models.cash_withdrawal import CashWithdrawal
from ledger.models.reconciliation_task import ReconciliationTask

__all__ = [
    "MAIN_RECORD_ID",
    "CapitalLedgerRecord",
    "CashWithdrawal",
    "ReconciliationTask",
]
