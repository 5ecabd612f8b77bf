import pytest
from django.urls import reverse

from tracking.models import DailyCheck
from tracking.services.checklist import coverage_percent

pytestmark = pytest.mark.django_db

DAY = '2024-05-01'


def _check(equipment, technician, when, status='pass'):
    return DailyCheck.objects.create(equipment=equipment, technician=technician, check_date=when, status=status)


def test_coverage_arithmetic():
    assert coverage_percent(0, 0) == 0
    assert coverage_percent(0, 4) == 0
    assert coverage_percent(4, 4) == 100
    assert coverage_percent(1, 3) == 33.33


def test_summary_with_no_checks_is_zero(client_for, technician, make_equipment):
    make_equipment()
    make_equipment()
    r = client_for(technician).get(reverse('daily_checks_summary'), {'date': DAY})
    assert r.status_code == 200
    assert r.data['totalEquipment'] == 2
    assert r.data['checkedEquipment'] == 0
    assert r.data['coverage'] == 0


def test_summary_with_every_item_checked_is_full(client_for, technician, nurse, make_equipment, local_dt):
    items = [make_equipment() for _ in range(3)]
    for item in items:
        _check(item, technician, local_dt(2024, 5, 1))
    # a second technician checking the same item does not count twice
    other = nurse
    _check(items[0], other, local_dt(2024, 5, 1, 15), status='needs_attention')
    r = client_for(technician).get(reverse('daily_checks_summary'), {'date': DAY})
    assert r.data['checkedEquipment'] == 3
    assert r.data['coverage'] == 100
    assert r.data['statusCounts'] == {'pass': 3, 'fail': 0, 'needs_attention': 1}


def test_summary_groups_by_department(client_for, technician, make_equipment, local_dt):
    icu = [make_equipment(department='العناية المركزة') for _ in range(2)]
    radiology = make_equipment(department='الأشعة')
    _check(icu[0], technician, local_dt(2024, 5, 1))
    _check(radiology, technician, local_dt(2024, 4, 30))
    r = client_for(technician).get(reverse('daily_checks_summary'), {'date': DAY})
    departments = {d['department']: d for d in r.data['departments']}
    assert departments['العناية المركزة']['coverage'] == 50
    assert departments['الأشعة']['coverage'] == 0
    assert r.data['coverage'] == 33.33


def test_list_filters_to_local_day(client_for, technician, make_equipment, local_dt):
    e = make_equipment()
    today = _check(e, technician, local_dt(2024, 5, 1, 1))
    _check(e, technician, local_dt(2024, 4, 30, 23))
    r = client_for(technician).get(reverse('daily_checks'), {'date': DAY})
    assert [c['id'] for c in r.data] == [today.id]
    assert r.data[0]['equipment']['id'] == e.id


def test_invalid_date_is_400(client_for, technician):
    r = client_for(technician).get(reverse('daily_checks'), {'date': '01/05/2024'})
    assert r.status_code == 400


def test_one_check_per_item_technician_and_day(client_for, technician, make_equipment):
    e = make_equipment()
    client = client_for(technician)
    payload = {
        'equipmentId': e.id, 'technicianId': technician.id,
        'checkDate': '2024-05-01T08:00:00+03:00', 'status': 'pass',
    }
    assert client.post(reverse('daily_checks'), payload, format='json').status_code == 201
    payload['checkDate'] = '2024-05-01T17:30:00+03:00'
    r = client.post(reverse('daily_checks'), payload, format='json')
    assert r.status_code == 400
    assert 'checkDate' in r.data['error']['fields']
    payload['checkDate'] = '2024-05-02T08:00:00+03:00'
    assert client.post(reverse('daily_checks'), payload, format='json').status_code == 201
