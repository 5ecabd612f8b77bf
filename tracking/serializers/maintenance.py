from django.utils import timezone
from rest_framework import serializers

from ..models import Equipment, MaintenanceRecord, User
from ..permissions import is_admin
from ..services.workflow import apply_maintenance_status
from .common import CleanCharField, iso, related_error

COST_MAX = 2147483647


def serialize_maintenance_record(r: MaintenanceRecord) -> dict:
    return {
        'id': r.id,
        'equipmentId': r.equipment_id,
        'technicianId': r.technician_id,
        'type': r.maintenance_type,
        'description': r.description,
        'partsReplaced': r.parts_replaced or [],
        'cost': r.cost,
        'startDate': iso(r.start_date),
        'completionDate': iso(r.completion_date),
        'status': r.status,
        'notes': r.notes,
        'createdAt': iso(r.created_at),
    }


class MaintenanceRecordSerializer(serializers.ModelSerializer):
    equipmentId = serializers.PrimaryKeyRelatedField(
        source='equipment', queryset=Equipment.objects.all(), error_messages=related_error('الجهاز'),
    )
    technicianId = serializers.PrimaryKeyRelatedField(
        source='technician', queryset=User.objects.all(), error_messages=related_error('الفني'),
    )
    type = serializers.ChoiceField(source='maintenance_type', choices=MaintenanceRecord.TYPE_CHOICES, default='preventive')
    description = CleanCharField()
    partsReplaced = serializers.ListField(
        source='parts_replaced', child=CleanCharField(max_length=255), required=False,
    )
    # minor currency units; capped at the 32-bit column range
    cost = serializers.IntegerField(min_value=0, max_value=COST_MAX, required=False, allow_null=True)
    startDate = serializers.DateTimeField(source='start_date')
    completionDate = serializers.DateTimeField(source='completion_date', required=False, allow_null=True)
    status = serializers.ChoiceField(choices=MaintenanceRecord.STATUS_CHOICES, default=MaintenanceRecord.STATUS_PENDING)
    notes = CleanCharField(required=False, allow_blank=True)
    force = serializers.BooleanField(required=False, write_only=True)

    class Meta:
        model = MaintenanceRecord
        fields = [
            'equipmentId', 'technicianId', 'type', 'description', 'partsReplaced', 'cost',
            'startDate', 'completionDate', 'status', 'notes', 'force',
        ]

    def create(self, validated_data):
        validated_data.pop('force', None)
        if validated_data.get('status') == MaintenanceRecord.STATUS_COMPLETED and not validated_data.get('completion_date'):
            validated_data['completion_date'] = timezone.now()
        return super().create(validated_data)

    def update(self, instance, validated_data):
        force = validated_data.pop('force', False) and is_admin(self.context['request'].user)
        target = validated_data.pop('status', None)
        if 'completion_date' in validated_data:
            instance.completion_date = validated_data.pop('completion_date')
        if target is not None:
            apply_maintenance_status(instance, target, force=force)
        return super().update(instance, validated_data)
