"""
Spreadsheet export/import and the project source download.
"""
from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path

from django.conf import settings
from django.http import HttpResponse
from django.utils import timezone
from django.utils.http import content_disposition_header
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsAdminRole, IsTechnicianOrAdmin
from ..services import spreadsheets

logger = logging.getLogger(__name__)

ZIP_EXCLUDED_DIRS = {'.git', '__pycache__', 'node_modules', 'staticfiles', 'media', 'backups', '.venv', 'venv', '.pytest_cache'}
ZIP_EXCLUDED_FILES = {'.env', 'db.sqlite3'}

PROJECT_README = """نظام تتبع الأجهزة الطبية
=========================

خادم Django لإدارة الأجهزة الطبية وسجلات الصيانة وتقارير الأعطال
والفحوصات اليومية، مع إشعارات فورية عبر WebSocket.

التشغيل:
    pip install -e .
    python manage.py migrate
    python manage.py ensure_default_users
    daphne -p 8000 medequip.asgi:application
"""


def _attachment(content: bytes, filename: str, content_type: str) -> HttpResponse:
    resp = HttpResponse(content, content_type=content_type)
    resp['Content-Disposition'] = content_disposition_header(True, filename)
    return resp


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def export_equipment(request):
    return _attachment(spreadsheets.export_equipment(), spreadsheets.EQUIPMENT_FILENAME, spreadsheets.XLSX_CONTENT_TYPE)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def export_maintenance(request):
    return _attachment(spreadsheets.export_maintenance(), spreadsheets.MAINTENANCE_FILENAME, spreadsheets.XLSX_CONTENT_TYPE)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def export_faults(request):
    return _attachment(spreadsheets.export_faults(), spreadsheets.FAULTS_FILENAME, spreadsheets.XLSX_CONTENT_TYPE)


def _project_files(root: Path):
    for path in sorted(root.rglob('*')):
        rel = path.relative_to(root)
        if any(part in ZIP_EXCLUDED_DIRS for part in rel.parts):
            continue
        if path.is_file() and path.name not in ZIP_EXCLUDED_FILES and path.suffix != '.pyc':
            yield path, rel


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def export_project_zip(request):
    root = Path(settings.BASE_DIR)
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, 'w', zipfile.ZIP_DEFLATED) as zf:
        for path, rel in _project_files(root):
            zf.write(path, rel.as_posix())
        zf.writestr('README-ar.txt', PROJECT_README)
    logger.info("project archive downloaded by %s", request.user.username)
    filename = f"medical-equipment-{timezone.localdate().isoformat()}.zip"
    return _attachment(buf.getvalue(), filename, 'application/zip')


def _uploaded_content(request) -> bytes:
    upload = request.FILES.get('file')
    if upload is None:
        raise ValidationError({'file': ['لم يتم رفع أي ملف']})
    if upload.size > settings.IMPORT_MAX_MB * 1024 * 1024:
        raise ValidationError({'file': [f'حجم الملف يتجاوز {settings.IMPORT_MAX_MB} ميغابايت']})
    if (upload.content_type or '') not in settings.IMPORT_ALLOWED_TYPES:
        raise ValidationError({'file': ['يُسمح فقط بملفات Excel']})
    return upload.read()


def _run_import(request, importer):
    content = _uploaded_content(request)
    try:
        result = importer(content)
    except spreadsheets.SpreadsheetError as exc:
        raise ValidationError({'file': [str(exc)]})
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsTechnicianOrAdmin])
@parser_classes([MultiPartParser, FormParser])
def import_equipment(request):
    return _run_import(request, spreadsheets.import_equipment)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsTechnicianOrAdmin])
@parser_classes([MultiPartParser, FormParser])
def import_maintenance(request):
    return _run_import(request, spreadsheets.import_maintenance)
