"""
Status transition tables for equipment, fault reports and maintenance.

Every status field is a closed enumeration.  A PATCH may only move a
record along an edge of its table; setting the current status again is
a no-op.  Admins can pass ``force`` to override the table for manual
corrections.
"""
from __future__ import annotations

from django.utils import timezone

from ..exceptions import InvalidTransition
from ..models import Equipment, FaultReport, MaintenanceRecord

FAULT_TRANSITIONS: dict[str, set[str]] = {
    FaultReport.STATUS_OPEN: {FaultReport.STATUS_ASSIGNED, FaultReport.STATUS_IN_PROGRESS, FaultReport.STATUS_CLOSED},
    FaultReport.STATUS_ASSIGNED: {FaultReport.STATUS_IN_PROGRESS, FaultReport.STATUS_OPEN, FaultReport.STATUS_CLOSED},
    FaultReport.STATUS_IN_PROGRESS: {FaultReport.STATUS_RESOLVED, FaultReport.STATUS_ASSIGNED},
    FaultReport.STATUS_RESOLVED: {FaultReport.STATUS_CLOSED, FaultReport.STATUS_IN_PROGRESS},
    FaultReport.STATUS_CLOSED: set(),
}

MAINTENANCE_TRANSITIONS: dict[str, set[str]] = {
    MaintenanceRecord.STATUS_PENDING: {MaintenanceRecord.STATUS_IN_PROGRESS, MaintenanceRecord.STATUS_COMPLETED},
    MaintenanceRecord.STATUS_IN_PROGRESS: {MaintenanceRecord.STATUS_COMPLETED, MaintenanceRecord.STATUS_PENDING},
    MaintenanceRecord.STATUS_COMPLETED: set(),
}

_EQUIPMENT_STATES = {value for value, _ in Equipment.STATUS_CHOICES}
EQUIPMENT_TRANSITIONS: dict[str, set[str]] = {
    state: _EQUIPMENT_STATES - {state} for state in _EQUIPMENT_STATES
}


def can_transition(table: dict[str, set[str]], current: str, target: str) -> bool:
    if current == target:
        return True
    return target in table.get(current, set())


def check_transition(table: dict[str, set[str]], current: str, target: str, *, force: bool = False) -> None:
    """Raise :class:`InvalidTransition` unless ``current -> target`` is allowed."""
    if target not in table:
        raise InvalidTransition(current, target)
    if force:
        return
    if not can_transition(table, current, target):
        raise InvalidTransition(current, target)


def apply_fault_status(report: FaultReport, target: str, *, force: bool = False) -> None:
    check_transition(FAULT_TRANSITIONS, report.status, target, force=force)
    report.status = target
    if target == FaultReport.STATUS_RESOLVED and report.resolved_at is None:
        report.resolved_at = timezone.now()


def apply_maintenance_status(record: MaintenanceRecord, target: str, *, force: bool = False) -> None:
    check_transition(MAINTENANCE_TRANSITIONS, record.status, target, force=force)
    record.status = target
    if target == MaintenanceRecord.STATUS_COMPLETED and record.completion_date is None:
        record.completion_date = timezone.now()


def apply_equipment_status(equipment: Equipment, target: str, *, force: bool = False) -> None:
    check_transition(EQUIPMENT_TRANSITIONS, equipment.status, target, force=force)
    equipment.status = target
