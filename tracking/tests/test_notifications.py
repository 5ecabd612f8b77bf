import pytest
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.urls import reverse
from rest_framework.authtoken.models import Token

from tracking.models import User
from tracking.realtime.middleware import TokenAuthMiddleware
from tracking.realtime.routing import websocket_urlpatterns
from tracking.serializers import FaultReportCreateSerializer
from tracking.services.faults import NEW_FAULT_REPORT, create_fault_report
from tracking.services.notifications import EVENT_TYPE, GROUP_ALL, Notifier, role_group

application = TokenAuthMiddleware(URLRouter(websocket_urlpatterns))


class RecordingLayer:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    async def group_send(self, group, message):
        if self.fail:
            raise ConnectionError('layer unavailable')
        self.sent.append((group, message))


# ---------------------------------------------------------------------
# Notifier
# ---------------------------------------------------------------------
def test_to_role_targets_the_role_group():
    layer = RecordingLayer()
    assert Notifier(layer).to_role(User.ROLE_TECHNICIAN, 'new_fault_report', {'id': 7}) is True
    group, message = layer.sent[0]
    assert group == role_group(User.ROLE_TECHNICIAN) == 'notifications.role.technician'
    assert message['type'] == EVENT_TYPE
    assert message['payload']['type'] == 'new_fault_report'
    assert message['payload']['data'] == {'id': 7}
    assert message['payload']['ts']


def test_sequence_numbers_increase():
    layer = RecordingLayer()
    notifier = Notifier(layer)
    notifier.to_all('a', {})
    notifier.to_all('b', {})
    async_to_sync(notifier.ato_all)('c', {})
    seqs = [m['payload']['seq'] for _, m in layer.sent]
    assert seqs == sorted(seqs)
    assert len(set(seqs)) == 3
    assert {g for g, _ in layer.sent} == {GROUP_ALL}


def test_failed_send_is_reported_not_raised():
    notifier = Notifier(RecordingLayer(fail=True))
    assert notifier.to_all('fault_report_updated', {}) is False
    assert async_to_sync(notifier.ato_role)('nurse', 'x', {}) is False


@pytest.mark.django_db
def test_new_report_is_pushed_after_commit(django_capture_on_commit_callbacks, nurse, make_equipment):
    layer = RecordingLayer()
    s = FaultReportCreateSerializer(data={
        'equipmentId': make_equipment().id, 'reportedBy': nurse.id,
        'title': 'شاشة مطفأة', 'description': 'لا تعمل الشاشة', 'priority': 'critical',
    })
    s.is_valid(raise_exception=True)
    with django_capture_on_commit_callbacks() as callbacks:
        data = create_fault_report(s, notifier=Notifier(layer))
        assert layer.sent == []
    assert len(callbacks) == 1
    callbacks[0]()
    group, message = layer.sent[0]
    assert group == role_group(User.ROLE_TECHNICIAN)
    assert message['payload']['type'] == NEW_FAULT_REPORT
    assert message['payload']['data'] == data


# ---------------------------------------------------------------------
# Socket fan-out
# ---------------------------------------------------------------------
@pytest.fixture
def channel_layer():
    layer = get_channel_layer()
    async_to_sync(layer.flush)()
    yield layer
    async_to_sync(layer.flush)()


async def _connect(token=None, path='/ws'):
    comm = WebsocketCommunicator(application, f'{path}?token={token}' if token else path)
    connected, _ = await comm.connect()
    assert connected
    welcome = await comm.receive_json_from()
    assert welcome['type'] == 'welcome'
    return comm, welcome


def _token(user):
    return Token.objects.create(user=user).key


def _fault_payload(equipment, reporter):
    return {
        'equipmentId': equipment.id, 'reportedBy': reporter.id,
        'title': 'إنذار مستمر', 'description': 'الجهاز يطلق إنذاراً دون سبب', 'priority': 'high',
    }


@pytest.mark.django_db(transaction=True)
def test_new_report_reaches_technicians_only(channel_layer, client_for, technician, nurse, make_equipment):
    tech_key, nurse_key = _token(technician), _token(nurse)
    equipment = make_equipment()
    client = client_for(nurse)

    async def scenario():
        tech, welcome = await _connect(tech_key)
        assert welcome['role'] == User.ROLE_TECHNICIAN
        ward, _ = await _connect(nurse_key, path='/ws/notifications/')
        r = await database_sync_to_async(client.post)(
            reverse('fault_reports'), _fault_payload(equipment, nurse), format='json',
        )
        assert r.status_code == 201
        message = await tech.receive_json_from(timeout=2)
        assert message['type'] == NEW_FAULT_REPORT
        assert message['data']['id'] == r.data['id']
        assert message['data']['equipment']['id'] == equipment.id
        assert await ward.receive_nothing()
        await tech.disconnect()
        await ward.disconnect()

    async_to_sync(scenario)()


@pytest.mark.django_db(transaction=True)
def test_update_reaches_every_socket(channel_layer, client_for, technician, nurse, make_equipment):
    tech_key = _token(technician)
    client = client_for(technician)
    r = client.post(reverse('fault_reports'), _fault_payload(make_equipment(), nurse), format='json')
    report_id = r.data['id']

    async def scenario():
        tech, _ = await _connect(tech_key)
        anonymous, welcome = await _connect()
        assert welcome['role'] is None
        r = await database_sync_to_async(client.patch)(
            reverse('fault_report_detail', args=[report_id]), {'status': 'in_progress'}, format='json',
        )
        assert r.status_code == 200
        for comm in (tech, anonymous):
            message = await comm.receive_json_from(timeout=2)
            assert message['type'] == 'fault_report_updated'
            assert message['data']['status'] == 'in_progress'
        await tech.disconnect()
        await anonymous.disconnect()

    async_to_sync(scenario)()


@pytest.mark.django_db(transaction=True)
def test_claimed_role_without_token_is_ignored(channel_layer):
    async def scenario():
        comm, _ = await _connect()
        await comm.send_json_to({'type': 'authenticate', 'role': 'technician', 'userId': 1})
        assert await comm.receive_json_from() == {'type': 'error', 'code': 4401, 'message': 'invalid_token'}
        await Notifier().ato_role(User.ROLE_TECHNICIAN, NEW_FAULT_REPORT, {'id': 1})
        assert await comm.receive_nothing()
        await comm.disconnect()

    async_to_sync(scenario)()


@pytest.mark.django_db(transaction=True)
def test_authenticate_message_binds_role(channel_layer, technician):
    key = _token(technician)

    async def scenario():
        comm, _ = await _connect()
        await comm.send_json_to({'type': 'authenticate', 'token': key})
        reply = await comm.receive_json_from()
        assert reply == {'type': 'authenticated', 'userId': technician.id, 'role': User.ROLE_TECHNICIAN}
        await Notifier().ato_role(User.ROLE_TECHNICIAN, NEW_FAULT_REPORT, {'id': 3})
        message = await comm.receive_json_from(timeout=2)
        assert message['data'] == {'id': 3}
        await comm.disconnect()

    async_to_sync(scenario)()


@pytest.mark.django_db(transaction=True)
def test_malformed_messages_are_dropped(channel_layer):
    async def scenario():
        comm, _ = await _connect()
        await comm.send_to(text_data='{not json')
        await comm.send_to(text_data='[1, 2]')
        await comm.send_json_to({'type': 'ping'})
        assert await comm.receive_json_from() == {'type': 'pong'}
        await comm.disconnect()

    async_to_sync(scenario)()
