"""
Admin panel configuration: linked Google Sheet and database URL.

The database URL is written to the ``.env`` file read by settings, so a
change only takes effect after the process restarts.
"""
from __future__ import annotations

import os
import re
from pathlib import Path

import dj_database_url
from django.conf import settings
from django.db import transaction
from dotenv import dotenv_values, set_key

from ..models import SheetsConnection, User

SHEET_ID_RE = re.compile(r'/spreadsheets/d/([a-zA-Z0-9-_]+)')
SUPPORTED_ENGINES = {
    'django.db.backends.postgresql': 'postgresql',
    'django.db.backends.mysql': 'mysql',
}
NOT_SET = 'غير محدد'


def extract_sheet_id(url: str) -> str | None:
    if 'docs.google.com' not in (url or ''):
        return None
    match = SHEET_ID_RE.search(url)
    return match.group(1) if match else None


@transaction.atomic
def connect_sheets(url: str, user: User | None) -> SheetsConnection:
    sheet_id = extract_sheet_id(url)
    if not sheet_id:
        raise ValueError('رابط Google Sheets غير صالح')
    SheetsConnection.objects.filter(is_active=True).update(is_active=False)
    return SheetsConnection.objects.create(sheet_id=sheet_id, sheets_url=url, connected_by=user)


def sheets_status() -> dict:
    conn = SheetsConnection.objects.filter(is_active=True).order_by('-connected_at', '-id').first()
    if conn is None:
        return {'connected': False}
    return {
        'connected': True,
        'sheetId': conn.sheet_id,
        'sheetsUrl': conn.sheets_url,
        'connectedAt': conn.connected_at.isoformat(),
        'connectedBy': conn.connected_by_id,
    }


def database_provider(url: str) -> str:
    """Return ``postgresql`` or ``mysql`` for a supported URL, else raise ValueError."""
    try:
        config = dj_database_url.parse(url)
    except (ValueError, KeyError) as exc:
        raise ValueError('رابط قاعدة البيانات غير صالح') from exc
    provider = SUPPORTED_ENGINES.get(config.get('ENGINE', ''))
    if provider is None:
        raise ValueError('يجب أن يكون الرابط لقاعدة PostgreSQL أو MySQL')
    return provider


def update_database_url(url: str) -> dict:
    provider = database_provider(url)
    env_file = Path(settings.ENV_FILE)
    env_file.parent.mkdir(parents=True, exist_ok=True)
    env_file.touch(exist_ok=True)
    set_key(str(env_file), 'DATABASE_URL', url)
    return {'status': 'updated', 'provider': provider, 'restartRequired': True}


def mask_url(url: str | None) -> str:
    if not url:
        return NOT_SET
    return f"{url[:15]}***{url[-10:]}"


def configured_database_url() -> str | None:
    env_file = Path(settings.ENV_FILE)
    if env_file.exists():
        value = dotenv_values(env_file).get('DATABASE_URL')
        if value:
            return value
    return os.getenv('DATABASE_URL') or None


def database_info() -> dict:
    url = configured_database_url()
    engine = settings.DATABASES['default']['ENGINE']
    return {
        'databaseUrl': mask_url(url),
        'configured': bool(url),
        'engine': engine.rsplit('.', 1)[-1],
        'provider': SUPPORTED_ENGINES.get(engine, engine.rsplit('.', 1)[-1]),
    }
