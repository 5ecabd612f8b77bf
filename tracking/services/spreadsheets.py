"""
Excel import and export for equipment, maintenance records and fault reports.

Workbooks use Arabic column headers and Arabic choice labels; dates are
written as ISO ``YYYY-MM-DD``.  Imports accept either the Arabic headers
or the English field names, validate each row on its own and collect a
``"الصف N: ..."`` message for every rejected row instead of aborting the
batch.  N is the sheet row, with the header on row 1.
"""
from __future__ import annotations

import datetime as dt
import json
import logging
import re
from io import BytesIO

import pandas as pd
from django.db import DatabaseError, transaction
from django.utils import timezone

from ..models import Equipment, FaultReport, MaintenanceRecord
from ..serializers import EquipmentSerializer, MaintenanceRecordSerializer

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

EQUIPMENT_SHEET = 'الأجهزة الطبية'
MAINTENANCE_SHEET = 'سجلات الصيانة'
FAULTS_SHEET = 'تقارير الأعطال'

EQUIPMENT_FILENAME = 'الأجهزة_الطبية.xlsx'
MAINTENANCE_FILENAME = 'سجلات_الصيانة.xlsx'
FAULTS_FILENAME = 'تقارير_الأعطال.xlsx'

# (field, Arabic header) in column order
EQUIPMENT_COLUMNS = [
    ('id', 'رقم الجهاز'),
    ('name', 'اسم الجهاز'),
    ('model', 'الموديل'),
    ('manufacturer', 'الشركة المصنعة'),
    ('serialNumber', 'الرقم التسلسلي'),
    ('barcode', 'الباركود'),
    ('department', 'القسم'),
    ('location', 'الموقع'),
    ('status', 'الحالة'),
    ('lastMaintenanceDate', 'تاريخ آخر صيانة'),
    ('nextMaintenanceDate', 'تاريخ الصيانة القادمة'),
    ('purchaseDate', 'تاريخ الشراء'),
    ('warrantyExpiry', 'انتهاء الضمان'),
    ('specifications', 'المواصفات'),
    ('createdAt', 'تاريخ الإدخال'),
]

MAINTENANCE_COLUMNS = [
    ('id', 'رقم السجل'),
    ('equipmentId', 'رقم الجهاز'),
    ('technicianId', 'رقم الفني'),
    ('type', 'نوع الصيانة'),
    ('description', 'الوصف'),
    ('partsReplaced', 'القطع المستبدلة'),
    ('cost', 'التكلفة'),
    ('startDate', 'تاريخ البداية'),
    ('completionDate', 'تاريخ الانتهاء'),
    ('status', 'الحالة'),
    ('notes', 'ملاحظات'),
    ('createdAt', 'تاريخ الإدخال'),
]

FAULT_COLUMNS = [
    ('id', 'رقم التقرير'),
    ('equipmentId', 'رقم الجهاز'),
    ('title', 'العنوان'),
    ('description', 'الوصف'),
    ('priority', 'الأولوية'),
    ('status', 'الحالة'),
    ('reportedBy', 'تم الإبلاغ بواسطة'),
    ('reportedAt', 'تاريخ الإبلاغ'),
    ('resolvedAt', 'تاريخ الحل'),
    ('resolutionNotes', 'ملاحظات الحل'),
    ('createdAt', 'تاريخ الإدخال'),
]

EQUIPMENT_REQUIRED_MESSAGE = 'بيانات مطلوبة مفقودة (اسم الجهاز، الموديل، الباركود)'
MAINTENANCE_REQUIRED_MESSAGE = 'بيانات مطلوبة مفقودة'


class SpreadsheetError(ValueError):
    """The uploaded workbook could not be read at all."""


# -------------------------
# Cell helpers
# -------------------------
def _normalize_header(value) -> str:
    return re.sub(r'[\s_\-]+', '', str(value)).lower()


def _header_map(columns) -> dict[str, str]:
    mapping = {}
    for field, label in columns:
        mapping[_normalize_header(label)] = field
        mapping[_normalize_header(field)] = field
    return mapping


def _cell(value):
    """Return the cell as a trimmed string (or datetime), ``None`` when empty."""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    if isinstance(value, (dt.datetime, dt.date)):
        return value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _day(value) -> str | None:
    if not value:
        return None
    if isinstance(value, dt.datetime) and timezone.is_aware(value):
        value = timezone.localtime(value)
    if isinstance(value, dt.datetime):
        return value.date().isoformat()
    return value.isoformat()


def parse_date(value) -> str | None:
    """Accept datetimes, ISO strings and dd/mm/yyyy; return ``YYYY-MM-DD``."""
    value = _cell(value)
    if value is None:
        return None
    if isinstance(value, (dt.datetime, dt.date)):
        return _day(value)
    text = str(value)
    for fmt in ('%Y-%m-%d', '%d/%m/%Y', '%d-%m-%Y', '%Y/%m/%d'):
        try:
            return dt.datetime.strptime(text[:10], fmt).date().isoformat()
        except ValueError:
            continue
    return text


def _parse_json(value, default):
    value = _cell(value)
    if value is None:
        return default
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return default


def _parse_parts(value) -> list[str]:
    parsed = _parse_json(value, None)
    if isinstance(parsed, list):
        return [str(p) for p in parsed]
    text = _cell(value)
    if not text:
        return []
    return [p.strip() for p in str(text).split(',') if p.strip()]


def _choice(value, choices, default=None):
    """Map an Arabic label or a raw code to the stored code."""
    value = _cell(value)
    if value is None:
        return default
    for code, label in choices:
        if value in (code, label):
            return code
    return value


def _label(value, choices) -> str:
    return dict(choices).get(value, value or '')


def _rows(content: bytes, columns) -> list[dict]:
    try:
        df = pd.read_excel(BytesIO(content), engine='openpyxl')
    except Exception as exc:
        raise SpreadsheetError('تعذر قراءة ملف Excel') from exc
    aliases = _header_map(columns)
    df = df.rename(columns=lambda c: aliases.get(_normalize_header(c), str(c)))
    return [{key: _cell(value) for key, value in record.items()} for record in df.to_dict(orient='records')]


def _format_errors(errors) -> str:
    parts = []
    for field, messages in errors.items():
        if isinstance(messages, (list, tuple)):
            text = '، '.join(str(m) for m in messages)
        else:
            text = str(messages)
        parts.append(text if field == 'non_field_errors' else f'{field}: {text}')
    return '؛ '.join(parts)


def _workbook(rows: list[dict], columns, sheet_name: str) -> bytes:
    df = pd.DataFrame(rows, columns=[label for _, label in columns])
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine='openpyxl') as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return buf.getvalue()


# -------------------------
# Export
# -------------------------
def export_equipment() -> bytes:
    rows = []
    for e in Equipment.objects.order_by('id'):
        rows.append({
            'رقم الجهاز': e.id,
            'اسم الجهاز': e.name,
            'الموديل': e.model,
            'الشركة المصنعة': e.manufacturer,
            'الرقم التسلسلي': e.serial_number,
            'الباركود': e.barcode,
            'القسم': e.department,
            'الموقع': e.location,
            'الحالة': _label(e.status, Equipment.STATUS_CHOICES),
            'تاريخ آخر صيانة': _day(e.last_maintenance_date) or '',
            'تاريخ الصيانة القادمة': _day(e.next_maintenance_date) or '',
            'تاريخ الشراء': _day(e.purchase_date) or '',
            'انتهاء الضمان': _day(e.warranty_expiry) or '',
            'المواصفات': json.dumps(e.specifications, ensure_ascii=False) if e.specifications else '',
            'تاريخ الإدخال': _day(e.created_at) or '',
        })
    return _workbook(rows, EQUIPMENT_COLUMNS, EQUIPMENT_SHEET)


def export_maintenance() -> bytes:
    rows = []
    for r in MaintenanceRecord.objects.order_by('id'):
        rows.append({
            'رقم السجل': r.id,
            'رقم الجهاز': r.equipment_id,
            'رقم الفني': r.technician_id,
            'نوع الصيانة': _label(r.maintenance_type, MaintenanceRecord.TYPE_CHOICES),
            'الوصف': r.description,
            'القطع المستبدلة': json.dumps(r.parts_replaced, ensure_ascii=False) if r.parts_replaced else '',
            'التكلفة': f'{r.cost / 100:.2f}' if r.cost is not None else '',
            'تاريخ البداية': _day(r.start_date) or '',
            'تاريخ الانتهاء': _day(r.completion_date) or '',
            'الحالة': _label(r.status, MaintenanceRecord.STATUS_CHOICES),
            'ملاحظات': r.notes,
            'تاريخ الإدخال': _day(r.created_at) or '',
        })
    return _workbook(rows, MAINTENANCE_COLUMNS, MAINTENANCE_SHEET)


def export_faults() -> bytes:
    rows = []
    for r in FaultReport.objects.order_by('id'):
        rows.append({
            'رقم التقرير': r.id,
            'رقم الجهاز': r.equipment_id,
            'العنوان': r.title,
            'الوصف': r.description,
            'الأولوية': _label(r.priority, FaultReport.PRIORITY_CHOICES),
            'الحالة': _label(r.status, FaultReport.STATUS_CHOICES),
            'تم الإبلاغ بواسطة': r.reported_by_id,
            'تاريخ الإبلاغ': _day(r.reported_at) or '',
            'تاريخ الحل': _day(r.resolved_at) or '',
            'ملاحظات الحل': r.resolution_notes,
            'تاريخ الإدخال': _day(r.created_at) or '',
        })
    return _workbook(rows, FAULT_COLUMNS, FAULTS_SHEET)


# -------------------------
# Import
# -------------------------
def _save_row(serializer) -> str | None:
    """Validate and save one row in its own savepoint; return an error text or None."""
    if not serializer.is_valid():
        return _format_errors(serializer.errors)
    try:
        with transaction.atomic():
            serializer.save()
    except DatabaseError as exc:
        # constraint or range errors the serializer cannot see
        return str(exc)
    return None


def import_equipment(content: bytes) -> dict:
    rows = _rows(content, EQUIPMENT_COLUMNS)
    success, errors = 0, []
    for i, row in enumerate(rows):
        line = i + 2
        if not (row.get('name') and row.get('model') and row.get('barcode')):
            errors.append(f'الصف {line}: {EQUIPMENT_REQUIRED_MESSAGE}')
            continue
        data = {
            'name': row.get('name'),
            'model': row.get('model'),
            'manufacturer': row.get('manufacturer'),
            'serialNumber': row.get('serialNumber'),
            'barcode': row.get('barcode'),
            'department': row.get('department'),
            'location': row.get('location'),
            'status': _choice(row.get('status'), Equipment.STATUS_CHOICES, Equipment.STATUS_OPERATIONAL),
            'lastMaintenanceDate': parse_date(row.get('lastMaintenanceDate')),
            'nextMaintenanceDate': parse_date(row.get('nextMaintenanceDate')),
            'purchaseDate': parse_date(row.get('purchaseDate')),
            'warrantyExpiry': parse_date(row.get('warrantyExpiry')),
            'specifications': _parse_json(row.get('specifications'), {}) or {},
        }
        error = _save_row(EquipmentSerializer(data=data))
        if error:
            errors.append(f'الصف {line}: {error}')
        else:
            success += 1
    logger.info("equipment import: %s/%s rows imported", success, len(rows))
    return {'success': success, 'total': len(rows), 'errors': errors}


def _cost_minor(value) -> int | None:
    value = _cell(value)
    if value is None:
        return None
    return int(round(float(value) * 100))


def import_maintenance(content: bytes) -> dict:
    rows = _rows(content, MAINTENANCE_COLUMNS)
    success, errors = 0, []
    for i, row in enumerate(rows):
        line = i + 2
        if not (row.get('equipmentId') and row.get('technicianId') and row.get('description')):
            errors.append(f'الصف {line}: {MAINTENANCE_REQUIRED_MESSAGE}')
            continue
        try:
            cost = _cost_minor(row.get('cost'))
        except (ValueError, OverflowError):
            errors.append(f'الصف {line}: cost: قيمة التكلفة غير صالحة')
            continue
        data = {
            'equipmentId': row.get('equipmentId'),
            'technicianId': row.get('technicianId'),
            'type': _choice(row.get('type'), MaintenanceRecord.TYPE_CHOICES, 'preventive'),
            'description': row.get('description'),
            'partsReplaced': _parse_parts(row.get('partsReplaced')),
            'cost': cost,
            'startDate': parse_date(row.get('startDate')) or timezone.now().isoformat(),
            'completionDate': parse_date(row.get('completionDate')),
            'status': _choice(row.get('status'), MaintenanceRecord.STATUS_CHOICES, MaintenanceRecord.STATUS_PENDING),
            'notes': row.get('notes') or '',
        }
        error = _save_row(MaintenanceRecordSerializer(data=data))
        if error:
            errors.append(f'الصف {line}: {error}')
        else:
            success += 1
    logger.info("maintenance import: %s/%s rows imported", success, len(rows))
    return {'success': success, 'total': len(rows), 'errors': errors}
