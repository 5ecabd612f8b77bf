"""
Daily backups of the three workbooks.

Each run writes the equipment, maintenance and fault workbooks into
``BACKUP_DIR/Medical_Equipment_Backup_<date>/`` and records one
:class:`DriveSync` row per file.
"""
from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path

from django.conf import settings
from django.utils import timezone

from ..models import DriveSync
from . import spreadsheets

logger = logging.getLogger(__name__)

EXPORTS = (
    (spreadsheets.EQUIPMENT_FILENAME, spreadsheets.export_equipment),
    (spreadsheets.MAINTENANCE_FILENAME, spreadsheets.export_maintenance),
    (spreadsheets.FAULTS_FILENAME, spreadsheets.export_faults),
)


def backup_folder_name(day: dt.date) -> str:
    return f"Medical_Equipment_Backup_{day.isoformat()}"


def run_backup(now: dt.datetime | None = None) -> dict:
    now = now or timezone.now()
    folder = Path(settings.BACKUP_DIR) / backup_folder_name(timezone.localtime(now).date())
    folder.mkdir(parents=True, exist_ok=True)

    files = []
    for filename, exporter in EXPORTS:
        target = folder / filename
        sync = DriveSync(file_name=filename, drive_file_id=str(target), sync_type='backup', last_sync_time=now)
        try:
            target.write_bytes(exporter())
            sync.status = 'completed'
        except Exception:
            logger.exception("backup of %s failed", filename)
            sync.status = 'failed'
        sync.save()
        files.append({'fileName': filename, 'path': str(target), 'status': sync.status})

    completed = sum(1 for f in files if f['status'] == 'completed')
    logger.info("backup to %s finished: %s/%s files", folder, completed, len(files))
    return {'folder': str(folder), 'files': files, 'completed': completed, 'failed': len(files) - completed}


class BackupSchedule:
    """Fire once per local day, at the first check inside ``BACKUP_HOUR``."""

    def __init__(self, hour: int | None = None):
        self.hour = settings.BACKUP_HOUR if hour is None else hour
        self.last_day: dt.date | None = None

    def due(self, now: dt.datetime) -> bool:
        local = timezone.localtime(now)
        return local.hour == self.hour and self.last_day != local.date()

    def mark_done(self, now: dt.datetime) -> None:
        self.last_day = timezone.localtime(now).date()
