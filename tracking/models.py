"""
Database models for the medical equipment tracking backend.

These models capture the inventory of biomedical equipment and the
records hanging off it: maintenance history, fault reports raised by
clinical staff, daily inspection checks and free-text notes.  Choice
labels are Arabic so that Django admin and the spreadsheet exports
speak the same language as the front-end.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Hospital staff member.

    Roles mirror the front-end screens: 'technician' (biomedical
    engineering), 'nurse' (clinical staff raising fault reports) and
    'admin'.  ``name`` is the display name shown in the RTL UI; the
    inherited ``username`` is the login identifier.
    """
    ROLE_TECHNICIAN = 'technician'
    ROLE_NURSE = 'nurse'
    ROLE_ADMIN = 'admin'
    ROLE_CHOICES = [
        (ROLE_TECHNICIAN, 'فني'),
        (ROLE_NURSE, 'ممرض'),
        (ROLE_ADMIN, 'مدير'),
    ]
    name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(unique=True, null=True, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=ROLE_NURSE, db_index=True)
    department = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def display_name(self) -> str:
        return self.name or self.get_full_name() or self.username

    def save(self, *args, **kwargs):
        # blank emails are stored as NULL so the unique index ignores them
        if not self.email:
            self.email = None
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.display_name} ({self.role})"


class Equipment(models.Model):
    """A single inventory item.

    ``status`` is the only workflow field; everything else is descriptive.
    Barcode and serial number are globally unique so the nurse-facing
    scan-to-report flow can resolve a device from its printed label.
    """
    STATUS_OPERATIONAL = 'operational'
    STATUS_MAINTENANCE = 'maintenance'
    STATUS_OUT_OF_SERVICE = 'out_of_service'
    STATUS_CHOICES = [
        (STATUS_OPERATIONAL, 'يعمل'),
        (STATUS_MAINTENANCE, 'تحت الصيانة'),
        (STATUS_OUT_OF_SERVICE, 'خارج الخدمة'),
    ]

    name = models.CharField(max_length=255)
    model = models.CharField(max_length=255)
    manufacturer = models.CharField(max_length=255)
    serial_number = models.CharField(max_length=128, unique=True)
    barcode = models.CharField(max_length=128, unique=True)
    department = models.CharField(max_length=255, db_index=True)
    location = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_OPERATIONAL, db_index=True)
    last_maintenance_date = models.DateTimeField(null=True, blank=True)
    next_maintenance_date = models.DateTimeField(null=True, blank=True)
    purchase_date = models.DateTimeField(null=True, blank=True)
    warranty_expiry = models.DateTimeField(null=True, blank=True)
    specifications = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.name} [{self.barcode}]"


class MaintenanceRecord(models.Model):
    """One service event on one equipment item, owned by a technician."""
    TYPE_CHOICES = [
        ('preventive', 'وقائية'),
        ('corrective', 'إصلاحية'),
        ('emergency', 'طارئة'),
    ]
    STATUS_PENDING = 'pending'
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_COMPLETED = 'completed'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'في الانتظار'),
        (STATUS_IN_PROGRESS, 'قيد التنفيذ'),
        (STATUS_COMPLETED, 'مكتمل'),
    ]

    equipment = models.ForeignKey(Equipment, on_delete=models.PROTECT, related_name='maintenance_records')
    technician = models.ForeignKey(User, on_delete=models.PROTECT, related_name='maintenance_records')
    maintenance_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='preventive')
    description = models.TextField()
    parts_replaced = models.JSONField(default=list, blank=True)
    # minor currency units (halalas / cents)
    cost = models.PositiveIntegerField(null=True, blank=True)
    start_date = models.DateTimeField()
    completion_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        indexes = [models.Index(fields=['equipment', 'start_date'], name='maint_equipment_start_idx')]

    def __str__(self) -> str:
        return f"{self.get_maintenance_type_display()} #{self.id} on {self.equipment_id}"


class FaultReport(models.Model):
    """An incident raised against an equipment item by clinical staff."""
    PRIORITY_CHOICES = [
        ('low', 'منخفض'),
        ('medium', 'متوسط'),
        ('high', 'عالي'),
        ('critical', 'حرج'),
    ]
    STATUS_OPEN = 'open'
    STATUS_ASSIGNED = 'assigned'
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_RESOLVED = 'resolved'
    STATUS_CLOSED = 'closed'
    STATUS_CHOICES = [
        (STATUS_OPEN, 'مفتوح'),
        (STATUS_ASSIGNED, 'تم التعيين'),
        (STATUS_IN_PROGRESS, 'قيد المعالجة'),
        (STATUS_RESOLVED, 'تم الحل'),
        (STATUS_CLOSED, 'مغلق'),
    ]

    equipment = models.ForeignKey(Equipment, on_delete=models.PROTECT, related_name='fault_reports')
    reported_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='reported_faults')
    assigned_to = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.PROTECT, related_name='assigned_faults'
    )
    title = models.CharField(max_length=255)
    description = models.TextField()
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_OPEN, db_index=True)
    reported_at = models.DateTimeField(default=timezone.now)
    resolved_at = models.DateTimeField(null=True, blank=True)
    resolution_notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.title} ({self.status})"


class DailyCheck(models.Model):
    """A routine pass/fail inspection of one item for one calendar day."""
    STATUS_CHOICES = [
        ('pass', 'سليم'),
        ('fail', 'عطل'),
        ('needs_attention', 'يحتاج متابعة'),
    ]

    equipment = models.ForeignKey(Equipment, on_delete=models.PROTECT, related_name='daily_checks')
    technician = models.ForeignKey(User, on_delete=models.PROTECT, related_name='daily_checks')
    check_date = models.DateTimeField()
    # local calendar day of check_date; kept in sync by save()
    check_day = models.DateField(db_index=True, editable=False)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['equipment', 'technician', 'check_day'], name='uniq_daily_check_per_day'
            ),
        ]

    def save(self, *args, **kwargs):
        self.check_day = local_day(self.check_date)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"check {self.equipment_id} {self.check_day} {self.status}"


class EquipmentNote(models.Model):
    """Free-text annotation on an equipment item."""
    TYPE_CHOICES = [
        ('general', 'عام'),
        ('issue', 'مشكلة'),
        ('maintenance', 'صيانة'),
        ('warning', 'تحذير'),
    ]
    PRIORITY_CHOICES = [
        ('low', 'منخفض'),
        ('medium', 'متوسط'),
        ('high', 'عالي'),
    ]

    equipment = models.ForeignKey(Equipment, on_delete=models.CASCADE, related_name='notes')
    created_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='equipment_notes')
    note = models.TextField()
    note_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='general')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return self.note[:30]


class DriveSync(models.Model):
    """Metadata about a file pushed to (or pulled from) the backup target."""
    SYNC_TYPE_CHOICES = (('export', 'export'), ('import', 'import'), ('backup', 'backup'))
    STATUS_CHOICES = (('pending', 'pending'), ('completed', 'completed'), ('failed', 'failed'))

    file_name = models.CharField(max_length=255)
    drive_file_id = models.CharField(max_length=512)
    last_sync_time = models.DateTimeField(default=timezone.now)
    sync_type = models.CharField(max_length=10, choices=SYNC_TYPE_CHOICES)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=['sync_type', 'created_at'], name='drivesync_type_created_idx')]

    def __str__(self):
        return f"{self.sync_type}:{self.file_name} ({self.status})"


class SheetsConnection(models.Model):
    """A Google Sheets document linked from the admin panel."""
    sheet_id = models.CharField(max_length=128)
    sheets_url = models.URLField(max_length=1024)
    connected_by = models.ForeignKey(User, null=True, on_delete=models.SET_NULL, related_name='+')
    connected_at = models.DateTimeField(auto_now_add=True)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return f"sheet {self.sheet_id}"


def local_day(value):
    """Calendar day of ``value`` in the configured time zone."""
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.date()
