import pytest
from django.urls import reverse

from tracking.models import FaultReport, User
from tracking.services.enrichment import enrich_fault_reports

pytestmark = pytest.mark.django_db


def _report(equipment, reporter, **kwargs):
    data = {
        'equipment': equipment,
        'reported_by': reporter,
        'title': 'صوت غريب من الجهاز',
        'description': 'يصدر الجهاز صوتاً غير طبيعي عند بدء التشغيل',
        'priority': 'medium',
    }
    data.update(kwargs)
    return FaultReport.objects.create(**data)


def test_create_defaults_to_open_and_is_enriched(client_for, nurse, make_equipment):
    e = make_equipment()
    r = client_for(nurse).post(reverse('fault_reports'), {
        'equipmentId': e.id,
        'reportedBy': nurse.id,
        'title': 'انقطاع في التيار',
        'description': 'الجهاز يتوقف بشكل مفاجئ',
        'priority': 'high',
    }, format='json')
    assert r.status_code == 201
    assert r.data['status'] == 'open'
    assert r.data['equipment']['barcode'] == e.barcode
    assert r.data['reportedByUser']['id'] == nurse.id
    assert r.data['assignedToUser'] is None


def test_create_requires_fields(client_for, nurse):
    r = client_for(nurse).post(reverse('fault_reports'), {'title': 'x'}, format='json')
    assert r.status_code == 400
    fields = r.data['error']['fields']
    for name in ('equipmentId', 'reportedBy', 'description', 'priority'):
        assert name in fields


def test_create_strips_markup(client_for, nurse, make_equipment):
    e = make_equipment()
    r = client_for(nurse).post(reverse('fault_reports'), {
        'equipmentId': e.id, 'reportedBy': nurse.id, 'title': '<b>عطل</b>',
        'description': '<script>x</script>وصف', 'priority': 'low',
    }, format='json')
    assert r.status_code == 201
    assert r.data['title'] == 'عطل'
    assert '<script>' not in r.data['description']


def test_filters_combine(client_for, technician, nurse, make_equipment):
    e = make_equipment()
    hit = _report(e, nurse, priority='critical', status='open')
    _report(e, nurse, priority='critical', status='closed')
    _report(e, nurse, priority='low', status='open')
    client = client_for(technician)
    r = client.get(reverse('fault_reports'), {'status': 'open', 'priority': 'critical'})
    assert [x['id'] for x in r.data] == [hit.id]
    assert len(client.get(reverse('fault_reports'), {'priority': 'critical'}).data) == 2


def test_patch_follows_transition_table(client_for, technician, nurse, make_equipment):
    report = _report(make_equipment(), nurse)
    client = client_for(technician)
    url = reverse('fault_report_detail', args=[report.id])

    r = client.patch(url, {'status': 'resolved'}, format='json')
    assert r.status_code == 400
    assert 'status' in r.data['error']['fields']

    r = client.patch(url, {'status': 'assigned', 'assignedTo': technician.id}, format='json')
    assert r.status_code == 200
    assert r.data['assignedToUser']['id'] == technician.id

    client.patch(url, {'status': 'in_progress'}, format='json')
    r = client.patch(url, {'status': 'resolved', 'resolutionNotes': 'تم استبدال المروحة'}, format='json')
    assert r.status_code == 200
    assert r.data['resolvedAt'] is not None
    assert r.data['resolutionNotes'] == 'تم استبدال المروحة'


def test_force_is_honoured_for_admins_only(client_for, technician, admin_user, nurse, make_equipment):
    report = _report(make_equipment(), nurse, status='closed')
    url = reverse('fault_report_detail', args=[report.id])
    assert client_for(technician).patch(url, {'status': 'open', 'force': True}, format='json').status_code == 400
    r = client_for(admin_user).patch(url, {'status': 'open', 'force': True}, format='json')
    assert r.status_code == 200
    assert r.data['status'] == 'open'


def test_assignee_must_be_active(client_for, technician, nurse, make_equipment):
    report = _report(make_equipment(), nurse)
    inactive = User.objects.create_user(username='gone', password='x', role='technician', is_active=False)
    r = client_for(technician).patch(
        reverse('fault_report_detail', args=[report.id]), {'assignedTo': inactive.id}, format='json',
    )
    assert r.status_code == 400
    assert 'assignedTo' in r.data['error']['fields']


def test_missing_equipment_enriches_to_none(nurse):
    orphan = FaultReport(id=1, equipment_id=987654, reported_by_id=nurse.id, title='t', description='d', priority='low')
    [data] = enrich_fault_reports([orphan])
    assert data['equipment'] is None
    assert data['reportedByUser']['id'] == nurse.id


def test_enrichment_is_batched(nurse, technician, make_equipment, django_assert_num_queries):
    a, b = make_equipment(), make_equipment()
    reports = [
        _report(a, nurse),
        _report(b, nurse, assigned_to=technician),
        _report(a, technician),
    ]
    # one query for equipment, one for users
    with django_assert_num_queries(2):
        enriched = enrich_fault_reports(reports)
    assert [r['equipment']['id'] for r in enriched] == [a.id, b.id, a.id]
    assert enriched[1]['assignedToUser']['id'] == technician.id


@pytest.mark.parametrize('state', ['in_progress', 'resolved', 'closed'])
def test_new_report_cannot_start_in_a_later_state(client_for, nurse, technician, make_equipment, state):
    e = make_equipment()
    for user in (nurse, technician):
        r = client_for(user).post(reverse('fault_reports'), {
            'equipmentId': e.id, 'reportedBy': nurse.id, 'title': 'عطل', 'description': 'وصف',
            'priority': 'low', 'status': state,
        }, format='json')
        assert r.status_code == 400
        assert 'status' in r.data['error']['fields']
    assert not FaultReport.objects.exists()


def test_new_report_may_start_assigned(client_for, nurse, technician, make_equipment):
    r = client_for(nurse).post(reverse('fault_reports'), {
        'equipmentId': make_equipment().id, 'reportedBy': nurse.id, 'assignedTo': technician.id,
        'title': 'عطل', 'description': 'وصف', 'priority': 'low', 'status': 'assigned',
    }, format='json')
    assert r.status_code == 201
    assert r.data['status'] == 'assigned'


def test_admin_may_backfill_a_resolved_report(client_for, admin_user, nurse, make_equipment):
    r = client_for(admin_user).post(reverse('fault_reports'), {
        'equipmentId': make_equipment().id, 'reportedBy': nurse.id, 'title': 'عطل قديم',
        'description': 'وصف', 'priority': 'low', 'status': 'resolved',
    }, format='json')
    assert r.status_code == 201
    assert r.data['resolvedAt'] is not None
