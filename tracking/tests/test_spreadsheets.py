from io import BytesIO

import pandas as pd
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse

from tracking.models import Equipment, MaintenanceRecord
from tracking.services import spreadsheets

pytestmark = pytest.mark.django_db


def _xlsx(rows):
    buf = BytesIO()
    pd.DataFrame(rows).to_excel(buf, index=False, engine='openpyxl')
    return buf.getvalue()


def _upload(content, name='data.xlsx', content_type=spreadsheets.XLSX_CONTENT_TYPE):
    return SimpleUploadedFile(name, content, content_type=content_type)


def _equipment_row(n, **kwargs):
    row = {
        'اسم الجهاز': f'جهاز تنفس {n}',
        'الموديل': 'V60',
        'الشركة المصنعة': 'Philips',
        'الرقم التسلسلي': f'IMP-{n}',
        'الباركود': f'IMPBC-{n}',
        'القسم': 'العناية المركزة',
        'الموقع': f'سرير {n}',
        'الحالة': 'يعمل',
    }
    row.update(kwargs)
    return row


def test_parse_date_formats():
    assert spreadsheets.parse_date('2024-03-09') == '2024-03-09'
    assert spreadsheets.parse_date('09/03/2024') == '2024-03-09'
    assert spreadsheets.parse_date(None) is None
    assert spreadsheets.parse_date(float('nan')) is None


def test_equipment_import_collects_row_errors(client_for, technician):
    rows = [
        _equipment_row(1),
        _equipment_row(2, **{'اسم الجهاز': None}),
        _equipment_row(3, **{'الحالة': 'تحت الصيانة'}),
        _equipment_row(4, **{'الباركود': None}),
        _equipment_row(5),
    ]
    r = client_for(technician).post(
        reverse('import_equipment'), {'file': _upload(_xlsx(rows))}, format='multipart',
    )
    assert r.status_code == 200
    assert r.data['success'] == 3
    assert r.data['total'] == 5
    assert len(r.data['errors']) == 2
    assert r.data['errors'][0].startswith('الصف 3:')
    assert r.data['errors'][1].startswith('الصف 5:')
    assert Equipment.objects.get(barcode='IMPBC-3').status == Equipment.STATUS_MAINTENANCE


def test_duplicate_barcode_row_is_rejected_alone(technician, make_equipment):
    make_equipment(barcode='IMPBC-1')
    result = spreadsheets.import_equipment(_xlsx([_equipment_row(1), _equipment_row(2)]))
    assert result['success'] == 1
    assert result['errors'][0].startswith('الصف 2:')
    assert Equipment.objects.filter(barcode='IMPBC-2').exists()


def test_english_headers_are_accepted(technician):
    rows = [{
        'name': 'Monitor', 'model': 'MX450', 'manufacturer': 'Philips', 'serialNumber': 'EN-1',
        'barcode': 'EN-BC-1', 'department': 'ICU', 'location': 'Bed 1', 'status': 'out_of_service',
    }]
    result = spreadsheets.import_equipment(_xlsx(rows))
    assert result == {'success': 1, 'total': 1, 'errors': []}
    assert Equipment.objects.get(barcode='EN-BC-1').status == Equipment.STATUS_OUT_OF_SERVICE


def test_equipment_export_round_trip(client_for, technician, make_equipment):
    originals = [make_equipment(specifications={'power': '220V'}) for _ in range(3)]
    barcodes = sorted(e.barcode for e in originals)
    client = client_for(technician)

    r = client.get(reverse('export_equipment'))
    assert r.status_code == 200
    assert r['Content-Type'] == spreadsheets.XLSX_CONTENT_TYPE
    assert 'attachment' in r['Content-Disposition']
    sheet = pd.read_excel(BytesIO(r.content), engine='openpyxl', sheet_name=spreadsheets.EQUIPMENT_SHEET)
    assert list(sheet.columns) == [label for _, label in spreadsheets.EQUIPMENT_COLUMNS]
    assert set(sheet['الحالة']) == {'يعمل'}

    Equipment.objects.all().delete()
    r = client.post(reverse('import_equipment'), {'file': _upload(r.content)}, format='multipart')
    assert r.data['success'] == 3, r.data['errors']
    assert sorted(Equipment.objects.values_list('barcode', flat=True)) == barcodes
    assert Equipment.objects.first().specifications == {'power': '220V'}


def test_maintenance_import_converts_cost_and_labels(client_for, technician, make_equipment):
    e = make_equipment()
    rows = [
        {
            'رقم الجهاز': e.id, 'رقم الفني': technician.id, 'نوع الصيانة': 'إصلاحية',
            'الوصف': 'تغيير البطارية', 'القطع المستبدلة': 'بطارية, كابل', 'التكلفة': 150.5,
            'تاريخ البداية': '2024-02-01', 'الحالة': 'مكتمل',
        },
        {'رقم الجهاز': e.id, 'رقم الفني': technician.id, 'نوع الصيانة': 'وقائية', 'الوصف': None},
    ]
    r = client_for(technician).post(
        reverse('import_maintenance'), {'file': _upload(_xlsx(rows))}, format='multipart',
    )
    assert r.data['success'] == 1
    assert r.data['errors'] == [f'الصف 3: {spreadsheets.MAINTENANCE_REQUIRED_MESSAGE}']
    record = MaintenanceRecord.objects.get()
    assert record.cost == 15050
    assert record.maintenance_type == 'corrective'
    assert record.parts_replaced == ['بطارية', 'كابل']
    assert record.status == MaintenanceRecord.STATUS_COMPLETED
    assert record.completion_date is not None


def test_maintenance_export_uses_major_units(client_for, technician, make_equipment, local_dt):
    MaintenanceRecord.objects.create(
        equipment=make_equipment(), technician=technician, description='فحص', cost=12345,
        start_date=local_dt(2024, 1, 10),
    )
    r = client_for(technician).get(reverse('export_maintenance'))
    sheet = pd.read_excel(BytesIO(r.content), engine='openpyxl', dtype=str)
    assert sheet['التكلفة'][0] == '123.45'
    assert sheet['نوع الصيانة'][0] == 'وقائية'
    assert sheet['تاريخ البداية'][0] == '2024-01-10'


def test_out_of_range_costs_become_row_errors(client_for, technician, make_equipment):
    e = make_equipment()
    base = {'رقم الجهاز': e.id, 'رقم الفني': technician.id, 'الوصف': 'فحص', 'تاريخ البداية': '2024-02-01'}
    rows = [
        dict(base, **{'التكلفة': 'inf'}),
        dict(base, **{'التكلفة': '1e20'}),
        dict(base, **{'التكلفة': '10'}),
    ]
    r = client_for(technician).post(
        reverse('import_maintenance'), {'file': _upload(_xlsx(rows))}, format='multipart',
    )
    assert r.status_code == 200
    assert r.data['success'] == 1
    assert r.data['total'] == 3
    assert [err.split(':')[0] for err in r.data['errors']] == ['الصف 2', 'الصف 3']
    assert MaintenanceRecord.objects.get().cost == 1000


def test_fault_export_is_open_to_nurses(client_for, nurse):
    r = client_for(nurse).get(reverse('export_faults'))
    assert r.status_code == 200
    sheet = pd.read_excel(BytesIO(r.content), engine='openpyxl')
    assert list(sheet.columns) == [label for _, label in spreadsheets.FAULT_COLUMNS]


def test_import_rejects_non_excel_upload(client_for, technician):
    upload = _upload(b'name,model\n', name='data.csv', content_type='text/csv')
    r = client_for(technician).post(reverse('import_equipment'), {'file': upload}, format='multipart')
    assert r.status_code == 400
    assert 'file' in r.data['error']['fields']


def test_import_rejects_unreadable_workbook(client_for, technician):
    r = client_for(technician).post(
        reverse('import_equipment'), {'file': _upload(b'not a workbook')}, format='multipart',
    )
    assert r.status_code == 400


def test_import_requires_a_file(client_for, technician):
    r = client_for(technician).post(reverse('import_maintenance'), {}, format='multipart')
    assert r.status_code == 400


def test_nurse_cannot_import(client_for, nurse):
    r = client_for(nurse).post(
        reverse('import_equipment'), {'file': _upload(_xlsx([_equipment_row(1)]))}, format='multipart',
    )
    assert r.status_code == 403
    assert not Equipment.objects.exists()


def test_project_zip_is_admin_only(client_for, nurse, admin_user):
    assert client_for(nurse).get(reverse('export_project_zip')).status_code == 403
    r = client_for(admin_user).get(reverse('export_project_zip'))
    assert r.status_code == 200
    assert r['Content-Type'] == 'application/zip'
