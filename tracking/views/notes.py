from __future__ import annotations

from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Equipment, EquipmentNote
from ..serializers import EquipmentNoteSerializer, EquipmentNoteUpdateSerializer
from ..services.enrichment import enrich_notes

TRUTHY = {'1', 'true', 'yes'}


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def equipment_notes(request, pk: int):
    equipment = get_object_or_404(Equipment, pk=pk)
    if request.method == 'GET':
        qs = EquipmentNote.objects.filter(equipment=equipment)
        if request.query_params.get('includeInactive', '').lower() not in TRUTHY:
            qs = qs.filter(is_active=True)
        return Response(enrich_notes(qs.order_by('-created_at', '-id')))

    s = EquipmentNoteSerializer(data=request.data, context={'request': request})
    s.is_valid(raise_exception=True)
    with transaction.atomic():
        note = s.save(equipment=equipment)
    return Response(enrich_notes([note])[0], status=status.HTTP_201_CREATED)


@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def note_detail(request, note_id: int):
    note = get_object_or_404(EquipmentNote, pk=note_id)
    if request.method == 'DELETE':
        note.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
    s = EquipmentNoteUpdateSerializer(note, data=request.data, partial=True, context={'request': request})
    s.is_valid(raise_exception=True)
    note = s.save()
    return Response(enrich_notes([note])[0])


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def equipment_note_delete(request, pk: int, note_id: int):
    note = get_object_or_404(EquipmentNote, pk=note_id, equipment_id=pk)
    note.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)
