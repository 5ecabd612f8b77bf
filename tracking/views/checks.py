from __future__ import annotations

from django.db import IntegrityError, transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsTechnicianOrAdmin
from ..serializers import DailyCheckSerializer
from ..services.checklist import checks_for_day, daily_summary, parse_day
from ..services.enrichment import enrich_daily_checks


def _day_param(request):
    raw = request.query_params.get('date')
    day = parse_day(raw)
    if raw and day is None:
        raise ValidationError({'date': ['صيغة التاريخ يجب أن تكون YYYY-MM-DD']})
    return day


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def daily_checks(request):
    if request.method == 'GET':
        return Response(enrich_daily_checks(checks_for_day(_day_param(request))))

    if not IsTechnicianOrAdmin().has_permission(request, None):
        raise PermissionDenied(IsTechnicianOrAdmin.message)
    s = DailyCheckSerializer(data=request.data, context={'request': request})
    s.is_valid(raise_exception=True)
    try:
        with transaction.atomic():
            check = s.save()
    except IntegrityError:
        # concurrent insert for the same equipment/technician/day
        raise ValidationError({'checkDate': ['تم تسجيل فحص لهذا الجهاز من نفس الفني في هذا اليوم']})
    return Response(enrich_daily_checks([check])[0], status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def daily_checks_summary(request):
    return Response(daily_summary(_day_param(request)))
