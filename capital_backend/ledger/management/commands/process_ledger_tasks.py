# ledger/management/commands/process_ledger_tasks.py

from __future__ import annotations

from django.core.management.base import BaseCommand

from ledger.models import ReconciliationTask
from ledger.services.hooks import process_pending_tasks


class Command(BaseCommand):
    help = "Run pending capital ledger reconciliation tasks (outbox drain)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--retry-failed",
            action="store_true",
            help="Also re-run tasks that exhausted their attempts (FAILED).",
        )

    def handle(self, *args, **options):
        include_failed = bool(options.get("retry_failed"))

        pending = ReconciliationTask.objects.filter(status=ReconciliationTask.Status.PENDING).count()
        failed = ReconciliationTask.objects.filter(status=ReconciliationTask.Status.FAILED).count()
        self.stdout.write(f"Pending: {pending}  Failed: {failed}")

        report = process_pending_tasks(include_failed=include_failed)

        self.stdout.write(f"Processed: {report.processed}")
        self.stdout.write(f"Skipped: {report.skipped}")
        if report.failed:
            self.stdout.write(self.style.WARNING(f"Failed: {report.failed}"))
        else:
            self.stdout.write(self.style.SUCCESS("All ledger tasks processed"))
