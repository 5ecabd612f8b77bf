"""
Management command to populate the database with demo data.
"""
from datetime import datetime

from django.conf import settings
from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from tracking.models import DailyCheck, Equipment, EquipmentNote, FaultReport, MaintenanceRecord, User


def _at(value: str):
    return timezone.make_aware(datetime.fromisoformat(value))


EQUIPMENT = [
    {
        "name": "جهاز التنفس الصناعي", "model": "PB840", "manufacturer": "Medtronic",
        "serial_number": "VM001234", "barcode": "8901234567890",
        "department": "العناية المركزة", "location": "غرفة 101", "status": Equipment.STATUS_OPERATIONAL,
        "last_maintenance_date": "2024-01-15", "next_maintenance_date": "2024-04-15",
        "purchase_date": "2023-06-01", "warranty_expiry": "2025-06-01",
        "specifications": {"نوع التهوية": "إيجابي وسلبي", "نطاق التنفس": "1-80 نفس/دقيقة", "الطاقة": "220V"},
    },
    {
        "name": "جهاز مراقبة المريض", "model": "IntelliVue MX450", "manufacturer": "Philips",
        "serial_number": "PM002345", "barcode": "8901234567891",
        "department": "العناية المركزة", "location": "غرفة 102", "status": Equipment.STATUS_OPERATIONAL,
        "last_maintenance_date": "2024-02-01", "next_maintenance_date": "2024-05-01",
        "purchase_date": "2023-08-15", "warranty_expiry": "2025-08-15",
        "specifications": {"عدد القنوات": "12 قناة", "دقة الضغط": "±1 mmHg", "الشاشة": "15 بوصة LCD"},
    },
    {
        "name": "جهاز الأشعة السينية المحمول", "model": "MobileArt Evolution", "manufacturer": "Shimadzu",
        "serial_number": "XR003456", "barcode": "8901234567892",
        "department": "الأشعة", "location": "قسم الأشعة", "status": Equipment.STATUS_MAINTENANCE,
        "last_maintenance_date": "2024-01-20", "next_maintenance_date": "2024-03-20",
        "purchase_date": "2023-04-10", "warranty_expiry": "2025-04-10",
        "specifications": {"قوة الأنبوب": "32 kW", "نطاق الجهد": "40-125 kVp", "نوع الكاشف": "رقمي"},
    },
]

DATE_FIELDS = ("last_maintenance_date", "next_maintenance_date", "purchase_date", "warranty_expiry")


class Command(BaseCommand):
    help = "Populate the database with demo equipment, maintenance, faults and checks"

    def add_arguments(self, parser):
        parser.add_argument("--flush", action="store_true", help="Delete existing tracking data first.")

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            EquipmentNote.objects.all().delete()
            DailyCheck.objects.all().delete()
            FaultReport.objects.all().delete()
            MaintenanceRecord.objects.all().delete()
            Equipment.objects.all().delete()

        call_command("ensure_default_users", stdout=self.stdout)
        names = {entry["role"]: entry["username"] for entry in settings.FALLBACK_USERS}
        technician = User.objects.get(username=names[User.ROLE_TECHNICIAN])
        nurse = User.objects.get(username=names[User.ROLE_NURSE])

        items = []
        for data in EQUIPMENT:
            data = dict(data)
            for field in DATE_FIELDS:
                data[field] = _at(data[field])
            item, _ = Equipment.objects.update_or_create(barcode=data.pop("barcode"), defaults=data)
            items.append(item)

        MaintenanceRecord.objects.get_or_create(
            equipment=items[0], technician=technician, start_date=_at("2024-01-15"),
            defaults={
                "maintenance_type": "preventive",
                "description": "صيانة دورية شاملة لجهاز التنفس الصناعي",
                "parts_replaced": ["فلتر الهواء", "خرطوم التنفس"],
                "cost": 85000,
                "completion_date": _at("2024-01-15"),
                "status": MaintenanceRecord.STATUS_COMPLETED,
                "notes": "تم استبدال جميع الفلاتر وفحص نظام التنفس",
            },
        )
        MaintenanceRecord.objects.get_or_create(
            equipment=items[2], technician=technician, start_date=_at("2024-03-01"),
            defaults={
                "maintenance_type": "corrective",
                "description": "إصلاح عطل في منطقة التحكم",
                "parts_replaced": ["لوحة التحكم الرئيسية"],
                "cost": 325000,
                "status": MaintenanceRecord.STATUS_IN_PROGRESS,
                "notes": "في انتظار وصول قطع الغيار من الشركة",
            },
        )

        FaultReport.objects.get_or_create(
            equipment=items[1], title="صوت غريب من الجهاز",
            defaults={
                "reported_by": nurse, "assigned_to": technician,
                "description": "يصدر الجهاز صوتاً غير طبيعي عند بدء التشغيل",
                "priority": "medium", "status": FaultReport.STATUS_ASSIGNED,
                "reported_at": _at("2024-03-05"),
            },
        )
        FaultReport.objects.get_or_create(
            equipment=items[0], title="انقطاع في التيار",
            defaults={
                "reported_by": nurse, "assigned_to": technician,
                "description": "الجهاز يتوقف بشكل مفاجئ لعدة ثوان",
                "priority": "high", "status": FaultReport.STATUS_IN_PROGRESS,
                "reported_at": _at("2024-03-03"),
            },
        )

        now = timezone.now()
        for item in items[:2]:
            DailyCheck.objects.get_or_create(
                equipment=item, technician=technician, check_day=timezone.localdate(now),
                defaults={"check_date": now, "status": "pass", "notes": "فحص يومي روتيني"},
            )

        EquipmentNote.objects.get_or_create(
            equipment=items[2], created_by=technician, note="الجهاز تحت الصيانة، يرجى عدم الاستخدام",
            defaults={"note_type": "warning", "priority": "high"},
        )
        self.stdout.write(self.style.SUCCESS(f"Demo data ready: {len(items)} equipment items."))
