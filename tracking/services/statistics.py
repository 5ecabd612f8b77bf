from __future__ import annotations

from django.db.models import Count, Q, Sum
from django.utils import timezone

from ..models import DailyCheck, Equipment, FaultReport, MaintenanceRecord, User
from .checklist import daily_summary

ACTIVE_FAULT_STATES = (FaultReport.STATUS_OPEN, FaultReport.STATUS_ASSIGNED, FaultReport.STATUS_IN_PROGRESS)


def equipment_statistics() -> dict:
    eq = Equipment.objects.aggregate(
        operational=Count('id', filter=Q(status=Equipment.STATUS_OPERATIONAL)),
        maintenance=Count('id', filter=Q(status=Equipment.STATUS_MAINTENANCE)),
        outOfService=Count('id', filter=Q(status=Equipment.STATUS_OUT_OF_SERVICE)),
    )
    faults = FaultReport.objects.aggregate(
        openReports=Count('id', filter=Q(status=FaultReport.STATUS_OPEN)),
        criticalReports=Count('id', filter=Q(priority='critical') & ~Q(status__in=['resolved', 'closed'])),
        highPriorityReports=Count('id', filter=Q(priority='high') & ~Q(status__in=['resolved', 'closed'])),
    )
    return {**eq, **faults}


def technician_dashboard(user: User) -> dict:
    today = timezone.localdate()
    return {
        'statistics': equipment_statistics(),
        'assignedFaults': FaultReport.objects.filter(assigned_to=user, status__in=ACTIVE_FAULT_STATES).count(),
        'unassignedFaults': FaultReport.objects.filter(status=FaultReport.STATUS_OPEN, assigned_to__isnull=True).count(),
        'activeMaintenance': MaintenanceRecord.objects.filter(
            technician=user, status__in=[MaintenanceRecord.STATUS_PENDING, MaintenanceRecord.STATUS_IN_PROGRESS],
        ).count(),
        'checksToday': DailyCheck.objects.filter(technician=user, check_day=today).count(),
        'dailyChecks': daily_summary(today),
    }


def nurse_dashboard(user: User) -> dict:
    mine = FaultReport.objects.filter(reported_by=user)
    department_equipment = Equipment.objects.filter(department=user.department) if user.department else Equipment.objects.none()
    return {
        'myReports': mine.count(),
        'myOpenReports': mine.filter(status__in=ACTIVE_FAULT_STATES).count(),
        'myResolvedReports': mine.filter(status__in=[FaultReport.STATUS_RESOLVED, FaultReport.STATUS_CLOSED]).count(),
        'departmentEquipment': department_equipment.count(),
        'departmentOutOfService': department_equipment.filter(status=Equipment.STATUS_OUT_OF_SERVICE).count(),
    }


def admin_dashboard() -> dict:
    users = User.objects.filter(is_active=True).values('role').annotate(n=Count('id'))
    faults = FaultReport.objects.values('status').annotate(n=Count('id'))
    return {
        'statistics': equipment_statistics(),
        'users': {row['role']: row['n'] for row in users},
        'equipmentTotal': Equipment.objects.count(),
        'maintenanceCostTotal': MaintenanceRecord.objects.aggregate(total=Sum('cost'))['total'] or 0,
        'faultsByStatus': {row['status']: row['n'] for row in faults},
        'dailyChecks': daily_summary(),
    }
