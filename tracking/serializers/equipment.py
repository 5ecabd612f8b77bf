from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from ..models import Equipment
from ..permissions import is_admin
from ..services.workflow import apply_equipment_status
from .common import CleanCharField, iso


def serialize_equipment(e: Equipment) -> dict:
    return {
        'id': e.id,
        'name': e.name,
        'model': e.model,
        'manufacturer': e.manufacturer,
        'serialNumber': e.serial_number,
        'barcode': e.barcode,
        'department': e.department,
        'location': e.location,
        'status': e.status,
        'lastMaintenanceDate': iso(e.last_maintenance_date),
        'nextMaintenanceDate': iso(e.next_maintenance_date),
        'purchaseDate': iso(e.purchase_date),
        'warrantyExpiry': iso(e.warranty_expiry),
        'specifications': e.specifications or {},
        'createdAt': iso(e.created_at),
    }


class EquipmentSerializer(serializers.ModelSerializer):
    name = CleanCharField(max_length=255)
    model = CleanCharField(max_length=255)
    manufacturer = CleanCharField(max_length=255)
    serialNumber = serializers.CharField(
        source='serial_number', max_length=128,
        validators=[UniqueValidator(Equipment.objects.all(), message='الرقم التسلسلي مستخدم لجهاز آخر')],
    )
    barcode = serializers.CharField(
        max_length=128,
        validators=[UniqueValidator(Equipment.objects.all(), message='الباركود مستخدم لجهاز آخر')],
    )
    department = CleanCharField(max_length=255)
    location = CleanCharField(max_length=255)
    status = serializers.ChoiceField(choices=Equipment.STATUS_CHOICES, required=False)
    lastMaintenanceDate = serializers.DateTimeField(source='last_maintenance_date', required=False, allow_null=True)
    nextMaintenanceDate = serializers.DateTimeField(source='next_maintenance_date', required=False, allow_null=True)
    purchaseDate = serializers.DateTimeField(source='purchase_date', required=False, allow_null=True)
    warrantyExpiry = serializers.DateTimeField(source='warranty_expiry', required=False, allow_null=True)
    specifications = serializers.DictField(required=False)
    force = serializers.BooleanField(required=False, write_only=True)

    class Meta:
        model = Equipment
        fields = [
            'name', 'model', 'manufacturer', 'serialNumber', 'barcode', 'department', 'location',
            'status', 'lastMaintenanceDate', 'nextMaintenanceDate', 'purchaseDate', 'warrantyExpiry',
            'specifications', 'force',
        ]

    def create(self, validated_data):
        validated_data.pop('force', None)
        return super().create(validated_data)

    def update(self, instance, validated_data):
        force = validated_data.pop('force', False) and is_admin(self.context['request'].user)
        target = validated_data.pop('status', None)
        if target is not None:
            apply_equipment_status(instance, target, force=force)
        return super().update(instance, validated_data)
