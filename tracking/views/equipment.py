"""
Equipment registry endpoints.

Listing and lookup are open to any signed-in user; the nurse-facing
scan-to-report screen resolves devices through the barcode route.
Creating equipment is limited to technicians and admins.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Equipment, User
from ..serializers import EquipmentSerializer, serialize_equipment


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def equipment_list(request):
    if request.method == 'GET':
        qs = Equipment.objects.all().order_by('id')
        department = request.query_params.get('department')
        status_val = request.query_params.get('status')
        if department:
            qs = qs.filter(department=department)
        if status_val:
            qs = qs.filter(status=status_val)
        return Response([serialize_equipment(e) for e in qs])

    if request.user.role not in (User.ROLE_TECHNICIAN, User.ROLE_ADMIN):
        raise PermissionDenied('إضافة الأجهزة متاحة للفنيين والمدير فقط')
    s = EquipmentSerializer(data=request.data, context={'request': request})
    s.is_valid(raise_exception=True)
    equipment = s.save()
    return Response(serialize_equipment(equipment), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def equipment_detail(request, pk: int):
    equipment = get_object_or_404(Equipment, pk=pk)
    if request.method == 'GET':
        return Response(serialize_equipment(equipment))
    s = EquipmentSerializer(equipment, data=request.data, partial=True, context={'request': request})
    s.is_valid(raise_exception=True)
    equipment = s.save()
    return Response(serialize_equipment(equipment))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def equipment_by_barcode(request, code: str):
    equipment = get_object_or_404(Equipment, barcode=code.strip())
    return Response(serialize_equipment(equipment))
