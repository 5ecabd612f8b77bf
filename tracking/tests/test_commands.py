from io import StringIO

import pytest
from django.core.management import call_command

from tracking.models import DailyCheck, DriveSync, Equipment, FaultReport, MaintenanceRecord, User

pytestmark = pytest.mark.django_db


def test_ensure_default_users_is_idempotent():
    call_command('ensure_default_users', stdout=StringIO())
    call_command('ensure_default_users', stdout=StringIO())
    assert set(User.objects.values_list('role', flat=True)) == {'technician', 'nurse', 'admin'}
    assert User.objects.count() == 3
    admin = User.objects.get(username='admin')
    assert admin.is_staff and admin.check_password('admin')


def test_reset_passwords():
    call_command('ensure_default_users', stdout=StringIO())
    nurse = User.objects.get(username='nurse')
    nurse.set_password('changed1')
    nurse.save()
    call_command('ensure_default_users', stdout=StringIO())
    nurse.refresh_from_db()
    assert nurse.check_password('changed1')
    call_command('ensure_default_users', '--reset-passwords', stdout=StringIO())
    nurse.refresh_from_db()
    assert nurse.check_password('123456')


def test_seed_demo_data_can_run_twice():
    call_command('seed_demo_data', stdout=StringIO())
    call_command('seed_demo_data', stdout=StringIO())
    assert Equipment.objects.count() == 3
    assert MaintenanceRecord.objects.count() == 2
    assert FaultReport.objects.count() == 2
    assert DailyCheck.objects.count() == 2
    assert MaintenanceRecord.objects.get(status='completed').cost == 85000


def test_run_backups_once(settings, tmp_path):
    settings.BACKUP_DIR = tmp_path
    out = StringIO()
    call_command('run_backups', '--once', stdout=out)
    assert '3 ok, 0 failed' in out.getvalue()
    assert DriveSync.objects.filter(sync_type='backup').count() == 3
