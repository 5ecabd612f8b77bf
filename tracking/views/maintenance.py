from __future__ import annotations

from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import MaintenanceRecord, User
from ..serializers import MaintenanceRecordSerializer
from ..services.enrichment import enrich_maintenance_records


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def maintenance_records(request):
    if request.method == 'GET':
        qs = MaintenanceRecord.objects.all().order_by('-start_date', '-id')
        equipment_id = request.query_params.get('equipmentId')
        if equipment_id:
            if not equipment_id.isdigit():
                return Response([])
            qs = qs.filter(equipment_id=int(equipment_id))
        return Response(enrich_maintenance_records(qs))

    if request.user.role not in (User.ROLE_TECHNICIAN, User.ROLE_ADMIN):
        raise PermissionDenied('تسجيل الصيانة متاح للفنيين فقط')
    s = MaintenanceRecordSerializer(data=request.data, context={'request': request})
    s.is_valid(raise_exception=True)
    with transaction.atomic():
        record = s.save()
    return Response(enrich_maintenance_records([record])[0], status=status.HTTP_201_CREATED)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def maintenance_record_detail(request, pk: int):
    record = get_object_or_404(MaintenanceRecord, pk=pk)
    s = MaintenanceRecordSerializer(record, data=request.data, partial=True, context={'request': request})
    s.is_valid(raise_exception=True)
    with transaction.atomic():
        record = s.save()
    return Response(enrich_maintenance_records([record])[0])
