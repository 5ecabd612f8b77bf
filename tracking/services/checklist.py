"""
Daily inspection coverage.

Coverage for a day is the share of equipment items that received at
least one check that day.  Department figures are computed by joining
``Equipment.department``; nothing is stored per department.
"""
from __future__ import annotations

import datetime as dt
from collections import Counter, defaultdict

from django.utils import timezone

from ..models import DailyCheck, Equipment


def parse_day(value: str | None) -> dt.date | None:
    if not value:
        return None
    try:
        return dt.date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def checks_for_day(day: dt.date | None):
    qs = DailyCheck.objects.all()
    if day is not None:
        qs = qs.filter(check_day=day)
    return qs.order_by('-check_date', '-id')


def coverage_percent(checked: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(checked * 100.0 / total, 2)


def daily_summary(day: dt.date | None = None) -> dict:
    day = day or timezone.localdate()
    equipment = dict(Equipment.objects.values_list('id', 'department'))
    rows = list(DailyCheck.objects.filter(check_day=day).values_list('equipment_id', 'status'))

    checked_ids = {equipment_id for equipment_id, _ in rows}
    status_counts = Counter(status for _, status in rows)

    per_department: dict[str, dict] = defaultdict(lambda: {'total': 0, 'checked': 0})
    for equipment_id, department in equipment.items():
        bucket = per_department[department]
        bucket['total'] += 1
        if equipment_id in checked_ids:
            bucket['checked'] += 1

    return {
        'date': day.isoformat(),
        'totalEquipment': len(equipment),
        'checkedEquipment': len(checked_ids & equipment.keys()),
        'coverage': coverage_percent(len(checked_ids & equipment.keys()), len(equipment)),
        'statusCounts': {key: status_counts.get(key, 0) for key, _ in DailyCheck.STATUS_CHOICES},
        'departments': [
            {
                'department': name,
                'total': bucket['total'],
                'checked': bucket['checked'],
                'coverage': coverage_percent(bucket['checked'], bucket['total']),
            }
            for name, bucket in sorted(per_department.items())
        ],
    }
