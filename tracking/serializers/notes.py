from rest_framework import serializers

from ..models import EquipmentNote, User
from .common import CleanCharField, iso, related_error


def serialize_note(n: EquipmentNote) -> dict:
    return {
        'id': n.id,
        'equipmentId': n.equipment_id,
        'createdBy': n.created_by_id,
        'note': n.note,
        'type': n.note_type,
        'priority': n.priority,
        'isActive': n.is_active,
        'createdAt': iso(n.created_at),
    }


class EquipmentNoteSerializer(serializers.ModelSerializer):
    createdBy = serializers.PrimaryKeyRelatedField(
        source='created_by', queryset=User.objects.all(), error_messages=related_error('المستخدم'),
    )
    note = CleanCharField()
    type = serializers.ChoiceField(source='note_type', choices=EquipmentNote.TYPE_CHOICES, default='general')
    priority = serializers.ChoiceField(choices=EquipmentNote.PRIORITY_CHOICES, default='medium')
    isActive = serializers.BooleanField(source='is_active', required=False)

    class Meta:
        model = EquipmentNote
        fields = ['createdBy', 'note', 'type', 'priority', 'isActive']


class EquipmentNoteUpdateSerializer(EquipmentNoteSerializer):
    createdBy = None

    class Meta(EquipmentNoteSerializer.Meta):
        fields = ['note', 'type', 'priority', 'isActive']
