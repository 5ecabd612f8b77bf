"""
Batched joins for list endpoints.

Related rows are fetched with one ``in_bulk`` query per related table,
keyed by the ids collected from the result set.  A dangling id maps to
``None`` instead of raising.
"""
from __future__ import annotations

from typing import Iterable

from ..models import Equipment, User
from .. import serializers as s


def _ids(rows: Iterable, *attrs: str) -> set[int]:
    ids: set[int] = set()
    for row in rows:
        for attr in attrs:
            value = getattr(row, attr, None)
            if value is not None:
                ids.add(value)
    return ids


def equipment_map(rows, attr: str = 'equipment_id') -> dict[int, Equipment]:
    ids = _ids(rows, attr)
    return Equipment.objects.in_bulk(ids) if ids else {}


def user_map(rows, *attrs: str) -> dict[int, User]:
    ids = _ids(rows, *attrs)
    return User.objects.in_bulk(ids) if ids else {}


def _equipment(equipment: dict, key):
    obj = equipment.get(key)
    return s.serialize_equipment(obj) if obj is not None else None


def _user(users: dict, key):
    obj = users.get(key)
    return s.serialize_user_brief(obj) if obj is not None else None


def enrich_fault_reports(reports) -> list[dict]:
    reports = list(reports)
    equipment = equipment_map(reports)
    users = user_map(reports, 'reported_by_id', 'assigned_to_id')
    out = []
    for r in reports:
        data = s.serialize_fault_report(r)
        data['equipment'] = _equipment(equipment, r.equipment_id)
        data['reportedByUser'] = _user(users, r.reported_by_id)
        data['assignedToUser'] = _user(users, r.assigned_to_id)
        out.append(data)
    return out


def enrich_maintenance_records(records) -> list[dict]:
    records = list(records)
    equipment = equipment_map(records)
    users = user_map(records, 'technician_id')
    out = []
    for r in records:
        data = s.serialize_maintenance_record(r)
        data['equipment'] = _equipment(equipment, r.equipment_id)
        data['technician'] = _user(users, r.technician_id)
        out.append(data)
    return out


def enrich_daily_checks(checks) -> list[dict]:
    checks = list(checks)
    equipment = equipment_map(checks)
    users = user_map(checks, 'technician_id')
    out = []
    for c in checks:
        data = s.serialize_daily_check(c)
        data['equipment'] = _equipment(equipment, c.equipment_id)
        data['technician'] = _user(users, c.technician_id)
        out.append(data)
    return out


def enrich_notes(notes) -> list[dict]:
    notes = list(notes)
    users = user_map(notes, 'created_by_id')
    out = []
    for n in notes:
        data = s.serialize_note(n)
        data['createdByUser'] = _user(users, n.created_by_id)
        out.append(data)
    return out
