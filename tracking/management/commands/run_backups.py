import time

from django.core.management.base import BaseCommand
from django.utils import timezone

from tracking.services.backup import BackupSchedule, run_backup


class Command(BaseCommand):
    help = "Write the daily spreadsheet backup at BACKUP_HOUR (checked once a minute)."

    def add_arguments(self, parser):
        parser.add_argument("--once", action="store_true", help="Run a single backup now and exit.")
        parser.add_argument("--interval", type=int, default=60, help="Seconds between schedule checks.")

    def handle(self, *args, **opts):
        if opts["once"]:
            self._report(run_backup())
            return

        schedule = BackupSchedule()
        self.stdout.write(f"Backup scheduler started; daily run at {schedule.hour:02d}:00")
        while True:
            now = timezone.now()
            if schedule.due(now):
                self._report(run_backup(now))
                schedule.mark_done(now)
            time.sleep(opts["interval"])

    def _report(self, result):
        style = self.style.SUCCESS if not result["failed"] else self.style.WARNING
        self.stdout.write(style(f"Backup to {result['folder']}: {result['completed']} ok, {result['failed']} failed"))
