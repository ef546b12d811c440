# ledger/management/commands/refresh_ledger.py

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from ledger.services.capital_ledger import CapitalLedger
from ledger.services.exceptions import LedgerServiceError


class Command(BaseCommand):
    help = "Reconcile the capital ledger against the live inventory valuation."

    def add_arguments(self, parser):
        parser.add_argument(
            "--show",
            action="store_true",
            help="Print the current snapshot without reconciling.",
        )

    def handle(self, *args, **options):
        ledger = CapitalLedger()

        try:
            snapshot = ledger.get_snapshot() if options.get("show") else ledger.refresh()
        except LedgerServiceError as exc:
            raise CommandError(f"Ledger refresh failed: {exc}") from exc

        self.stdout.write(f"cash_in_hand      = {snapshot.cash_in_hand}")
        self.stdout.write(f"total_stock_value = {snapshot.total_stock_value}")
        self.stdout.write(f"total_investment  = {snapshot.total_investment}")
        self.stdout.write(f"total_profit      = {snapshot.total_profit}")
        self.stdout.write(self.style.SUCCESS(f"Ledger at version {snapshot.version}"))
