"""
Fault report writes and their notifications.

New reports go to technicians only; any update goes to every connected
client.  Pushes are sent after the surrounding transaction commits so a
client never sees a report that was rolled back.
"""
from __future__ import annotations

import logging

from django.db import transaction

from ..models import FaultReport, User
from .enrichment import enrich_fault_reports
from .notifications import Notifier

logger = logging.getLogger(__name__)

NEW_FAULT_REPORT = 'new_fault_report'
FAULT_REPORT_UPDATED = 'fault_report_updated'


def create_fault_report(serializer, notifier: Notifier | None = None) -> dict:
    notifier = notifier or Notifier()
    with transaction.atomic():
        report: FaultReport = serializer.save()
        data = enrich_fault_reports([report])[0]
        transaction.on_commit(lambda: notifier.to_role(User.ROLE_TECHNICIAN, NEW_FAULT_REPORT, data))
    logger.info("fault report %s created for equipment %s (%s)", report.id, report.equipment_id, report.priority)
    return data


def update_fault_report(serializer, notifier: Notifier | None = None) -> dict:
    notifier = notifier or Notifier()
    with transaction.atomic():
        report: FaultReport = serializer.save()
        data = enrich_fault_reports([report])[0]
        transaction.on_commit(lambda: notifier.to_all(FAULT_REPORT_UPDATED, data))
    logger.info("fault report %s updated (status=%s)", report.id, report.status)
    return data
