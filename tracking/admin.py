"""
Django admin registrations for the tracking models.
"""
from django.contrib import admin

from .models import DailyCheck, DriveSync, Equipment, EquipmentNote, FaultReport, MaintenanceRecord, SheetsConnection, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'name', 'role', 'department', 'is_active', 'is_staff')
    list_filter = ('role', 'department', 'is_active')
    search_fields = ('username', 'name', 'email', 'phone')
    exclude = ('password',)


@admin.register(Equipment)
class EquipmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'model', 'barcode', 'serial_number', 'department', 'status')
    list_filter = ('status', 'department')
    search_fields = ('name', 'model', 'barcode', 'serial_number', 'manufacturer')


@admin.register(MaintenanceRecord)
class MaintenanceRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'equipment', 'technician', 'maintenance_type', 'status', 'start_date', 'completion_date')
    list_filter = ('maintenance_type', 'status')
    search_fields = ('equipment__name', 'equipment__barcode', 'description')
    raw_id_fields = ('equipment', 'technician')


@admin.register(FaultReport)
class FaultReportAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'equipment', 'priority', 'status', 'reported_by', 'assigned_to', 'reported_at')
    list_filter = ('priority', 'status')
    search_fields = ('title', 'description', 'equipment__barcode')
    raw_id_fields = ('equipment', 'reported_by', 'assigned_to')


@admin.register(DailyCheck)
class DailyCheckAdmin(admin.ModelAdmin):
    list_display = ('id', 'equipment', 'technician', 'check_day', 'status')
    list_filter = ('status', 'check_day')
    raw_id_fields = ('equipment', 'technician')


@admin.register(EquipmentNote)
class EquipmentNoteAdmin(admin.ModelAdmin):
    list_display = ('id', 'equipment', 'note_type', 'priority', 'is_active', 'created_by', 'created_at')
    list_filter = ('note_type', 'priority', 'is_active')


@admin.register(DriveSync)
class DriveSyncAdmin(admin.ModelAdmin):
    list_display = ('file_name', 'sync_type', 'status', 'last_sync_time')
    list_filter = ('sync_type', 'status')


@admin.register(SheetsConnection)
class SheetsConnectionAdmin(admin.ModelAdmin):
    list_display = ('sheet_id', 'connected_by', 'connected_at', 'is_active')
