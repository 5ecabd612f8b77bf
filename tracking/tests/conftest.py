import datetime as dt
import itertools

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from tracking.models import Equipment, User

_counter = itertools.count(1)


@pytest.fixture(autouse=True)
def _clear_cache():
    # login throttle and notification sequence live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def technician(db):
    return User.objects.create_user(
        username='tech1', password='P@ssw0rd1', name='فني الأجهزة', role=User.ROLE_TECHNICIAN,
        department='الصيانة', email='tech1@hospital.com',
    )


@pytest.fixture
def nurse(db):
    return User.objects.create_user(
        username='nurse1', password='P@ssw0rd1', name='ممرضة القسم', role=User.ROLE_NURSE,
        department='العناية المركزة', email='nurse1@hospital.com',
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username='admin1', password='P@ssw0rd1', name='مدير النظام', role=User.ROLE_ADMIN,
        department='إدارة النظام', email='admin1@hospital.com',
    )


@pytest.fixture
def client_for():
    def make(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return make


@pytest.fixture
def make_equipment(db):
    def make(**kwargs):
        n = next(_counter)
        data = {
            'name': f'جهاز {n}',
            'model': f'M-{n}',
            'manufacturer': 'Philips',
            'serial_number': f'SN-{n:05d}',
            'barcode': f'BC-{n:05d}',
            'department': 'العناية المركزة',
            'location': f'غرفة {100 + n}',
        }
        data.update(kwargs)
        return Equipment.objects.create(**data)
    return make


@pytest.fixture
def local_dt():
    def make(year, month, day, hour=9):
        return timezone.make_aware(dt.datetime(year, month, day, hour, 0))
    return make
