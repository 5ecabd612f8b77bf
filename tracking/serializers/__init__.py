from .checks import DailyCheckSerializer, serialize_daily_check
from .equipment import EquipmentSerializer, serialize_equipment
from .faults import FaultReportCreateSerializer, FaultReportUpdateSerializer, serialize_fault_report
from .maintenance import MaintenanceRecordSerializer, serialize_maintenance_record
from .notes import EquipmentNoteSerializer, EquipmentNoteUpdateSerializer, serialize_note
from .users import serialize_user, serialize_user_brief
