from django.utils import timezone
from rest_framework import serializers

from ..models import Equipment, FaultReport, User
from ..permissions import is_admin
from ..services.workflow import apply_fault_status
from .common import CleanCharField, iso, related_error

CREATE_STATES = (FaultReport.STATUS_OPEN, FaultReport.STATUS_ASSIGNED)


def serialize_fault_report(r: FaultReport) -> dict:
    return {
        'id': r.id,
        'equipmentId': r.equipment_id,
        'reportedBy': r.reported_by_id,
        'assignedTo': r.assigned_to_id,
        'title': r.title,
        'description': r.description,
        'priority': r.priority,
        'status': r.status,
        'reportedAt': iso(r.reported_at),
        'resolvedAt': iso(r.resolved_at),
        'resolutionNotes': r.resolution_notes,
        'createdAt': iso(r.created_at),
    }


class FaultReportCreateSerializer(serializers.ModelSerializer):
    equipmentId = serializers.PrimaryKeyRelatedField(
        source='equipment', queryset=Equipment.objects.all(), error_messages=related_error('الجهاز'),
    )
    reportedBy = serializers.PrimaryKeyRelatedField(
        source='reported_by', queryset=User.objects.all(), error_messages=related_error('المستخدم'),
    )
    assignedTo = serializers.PrimaryKeyRelatedField(
        source='assigned_to', queryset=User.objects.filter(is_active=True),
        required=False, allow_null=True, error_messages=related_error('المستخدم المعين'),
    )
    title = CleanCharField(max_length=255)
    description = CleanCharField()
    priority = serializers.ChoiceField(choices=FaultReport.PRIORITY_CHOICES)
    status = serializers.ChoiceField(choices=FaultReport.STATUS_CHOICES, default=FaultReport.STATUS_OPEN)
    reportedAt = serializers.DateTimeField(source='reported_at', required=False)

    class Meta:
        model = FaultReport
        fields = ['equipmentId', 'reportedBy', 'assignedTo', 'title', 'description', 'priority', 'status', 'reportedAt']

    def validate_status(self, value):
        # later states are reached through PATCH; admins may back-fill
        request = self.context.get('request')
        if value not in CREATE_STATES and not is_admin(getattr(request, 'user', None)):
            raise serializers.ValidationError('يجب أن يبدأ التقرير بحالة مفتوح أو تم التعيين')
        return value

    def create(self, validated_data):
        if validated_data.get('status') == FaultReport.STATUS_RESOLVED:
            validated_data['resolved_at'] = timezone.now()
        return super().create(validated_data)


class FaultReportUpdateSerializer(serializers.ModelSerializer):
    assignedTo = serializers.PrimaryKeyRelatedField(
        source='assigned_to', queryset=User.objects.filter(is_active=True),
        required=False, allow_null=True, error_messages=related_error('المستخدم المعين'),
    )
    title = CleanCharField(max_length=255, required=False)
    description = CleanCharField(required=False)
    priority = serializers.ChoiceField(choices=FaultReport.PRIORITY_CHOICES, required=False)
    status = serializers.ChoiceField(choices=FaultReport.STATUS_CHOICES, required=False)
    resolutionNotes = CleanCharField(source='resolution_notes', required=False, allow_blank=True)
    resolvedAt = serializers.DateTimeField(source='resolved_at', required=False, allow_null=True)
    force = serializers.BooleanField(required=False, write_only=True)

    class Meta:
        model = FaultReport
        fields = ['assignedTo', 'title', 'description', 'priority', 'status', 'resolutionNotes', 'resolvedAt', 'force']

    def update(self, instance, validated_data):
        force = validated_data.pop('force', False) and is_admin(self.context['request'].user)
        target = validated_data.pop('status', None)
        if 'resolved_at' in validated_data:
            instance.resolved_at = validated_data.pop('resolved_at')
        if target is not None:
            apply_fault_status(instance, target, force=force)
        return super().update(instance, validated_data)
