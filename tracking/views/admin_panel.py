"""
Admin panel endpoints: Google Sheets link, database URL and backups.

All routes require the admin role; other signed-in users get 403.
"""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsAdminRole
from ..services import admin_config
from ..services.backup import run_backup

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def connect_sheets(request):
    url = (request.data.get('sheetsUrl') or '').strip()
    if not url:
        raise ValidationError({'sheetsUrl': ['رابط Google Sheets مطلوب']})
    try:
        conn = admin_config.connect_sheets(url, request.user)
    except ValueError as exc:
        raise ValidationError({'sheetsUrl': [str(exc)]})
    logger.info("sheet %s connected by %s", conn.sheet_id, request.user.username)
    return Response({'ok': True, 'sheetId': conn.sheet_id, 'message': 'تم ربط Google Sheets بنجاح'})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def sheets_status(request):
    return Response(admin_config.sheets_status())


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def update_database(request):
    url = (request.data.get('databaseUrl') or '').strip()
    if not url:
        raise ValidationError({'databaseUrl': ['رابط قاعدة البيانات مطلوب']})
    try:
        result = admin_config.update_database_url(url)
    except ValueError as exc:
        raise ValidationError({'databaseUrl': [str(exc)]})
    logger.warning("database url changed by %s (%s); restart required", request.user.username, result['provider'])
    return Response({'ok': True, 'message': 'تم تحديث رابط قاعدة البيانات، يلزم إعادة تشغيل الخادم', **result})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def database_info(request):
    return Response(admin_config.database_info())


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def drive_backup(request):
    return Response({'ok': True, **run_backup()})
