"""
URL mappings for the equipment tracking API.

Paths mirror the ones the front-end calls, so trailing slashes are
deliberately omitted.
"""
from django.urls import include, path

from .auth_views import jwt_refresh_view, login_view, logout_view, register_view
from .views import admin_panel, checks, dashboard, equipment, faults, health, maintenance, notes, transfer, users

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/register', register_view, name='register_view'),
    path('api/auth/logout', logout_view, name='logout_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('api/auth/me', users.current_user, name='current_user'),
    path('api/users', users.list_users, name='list_users'),

    # Equipment
    path('api/equipment', equipment.equipment_list, name='equipment_list'),
    path('api/equipment/barcode/<str:code>', equipment.equipment_by_barcode, name='equipment_by_barcode'),
    path('api/equipment/<int:pk>', equipment.equipment_detail, name='equipment_detail'),

    # Equipment notes
    path('api/equipment/<int:pk>/notes', notes.equipment_notes, name='equipment_notes'),
    path('api/equipment/<int:pk>/notes/<int:note_id>', notes.equipment_note_delete, name='equipment_note_delete'),
    path('api/equipment-notes/<int:note_id>', notes.note_detail, name='note_detail'),

    # Fault reports
    path('api/fault-reports', faults.fault_reports, name='fault_reports'),
    path('api/fault-reports/<int:pk>', faults.fault_report_detail, name='fault_report_detail'),

    # Maintenance
    path('api/maintenance-records', maintenance.maintenance_records, name='maintenance_records'),
    path('api/maintenance-records/<int:pk>', maintenance.maintenance_record_detail, name='maintenance_record_detail'),

    # Daily checks
    path('api/daily-checks', checks.daily_checks, name='daily_checks'),
    path('api/daily-checks/summary', checks.daily_checks_summary, name='daily_checks_summary'),

    # Statistics & dashboards
    path('api/statistics', dashboard.equipment_statistics, name='statistics'),
    path('api/dashboard/technician', dashboard.technician_dashboard, name='technician_dashboard'),
    path('api/dashboard/nurse', dashboard.nurse_dashboard, name='nurse_dashboard'),
    path('api/dashboard/admin', dashboard.admin_dashboard, name='admin_dashboard'),

    # Import / export
    path('api/export/equipment', transfer.export_equipment, name='export_equipment'),
    path('api/export/maintenance', transfer.export_maintenance, name='export_maintenance'),
    path('api/export/faults', transfer.export_faults, name='export_faults'),
    path('api/export/project-zip', transfer.export_project_zip, name='export_project_zip'),
    path('api/import/equipment', transfer.import_equipment, name='import_equipment'),
    path('api/import/maintenance', transfer.import_maintenance, name='import_maintenance'),

    # Admin panel
    path('api/admin/connect-sheets', admin_panel.connect_sheets, name='connect_sheets'),
    path('api/admin/sheets-status', admin_panel.sheets_status, name='sheets_status'),
    path('api/admin/update-database', admin_panel.update_database, name='update_database'),
    path('api/admin/database-info', admin_panel.database_info, name='database_info'),
    path('api/drive/backup', admin_panel.drive_backup, name='drive_backup'),
]
