from rest_framework import serializers

from ..models import DailyCheck, Equipment, User, local_day
from .common import CleanCharField, iso, related_error


def serialize_daily_check(c: DailyCheck) -> dict:
    return {
        'id': c.id,
        'equipmentId': c.equipment_id,
        'technicianId': c.technician_id,
        'checkDate': iso(c.check_date),
        'checkDay': iso(c.check_day),
        'status': c.status,
        'notes': c.notes,
        'createdAt': iso(c.created_at),
    }


class DailyCheckSerializer(serializers.ModelSerializer):
    equipmentId = serializers.PrimaryKeyRelatedField(
        source='equipment', queryset=Equipment.objects.all(), error_messages=related_error('الجهاز'),
    )
    technicianId = serializers.PrimaryKeyRelatedField(
        source='technician', queryset=User.objects.all(), error_messages=related_error('الفني'),
    )
    checkDate = serializers.DateTimeField(source='check_date')
    status = serializers.ChoiceField(choices=DailyCheck.STATUS_CHOICES)
    notes = CleanCharField(required=False, allow_blank=True)

    class Meta:
        model = DailyCheck
        fields = ['equipmentId', 'technicianId', 'checkDate', 'status', 'notes']

    def validate(self, attrs):
        day = local_day(attrs['check_date'])
        duplicate = DailyCheck.objects.filter(
            equipment=attrs['equipment'], technician=attrs['technician'], check_day=day,
        ).exists()
        if duplicate:
            raise serializers.ValidationError({'checkDate': ['تم تسجيل فحص لهذا الجهاز من نفس الفني في هذا اليوم']})
        return attrs
