import pytest

from tracking.exceptions import InvalidTransition
from tracking.models import FaultReport, MaintenanceRecord
from tracking.services.workflow import (
    EQUIPMENT_TRANSITIONS,
    FAULT_TRANSITIONS,
    MAINTENANCE_TRANSITIONS,
    apply_fault_status,
    apply_maintenance_status,
    check_transition,
)


@pytest.mark.parametrize('current,target', [
    ('open', 'assigned'),
    ('assigned', 'in_progress'),
    ('in_progress', 'resolved'),
    ('resolved', 'closed'),
    ('resolved', 'in_progress'),
    ('open', 'open'),
])
def test_allowed_fault_transitions(current, target):
    check_transition(FAULT_TRANSITIONS, current, target)


@pytest.mark.parametrize('current,target', [
    ('open', 'resolved'),
    ('closed', 'open'),
    ('in_progress', 'open'),
])
def test_rejected_fault_transitions(current, target):
    with pytest.raises(InvalidTransition) as info:
        check_transition(FAULT_TRANSITIONS, current, target)
    assert 'status' in info.value.detail


def test_force_overrides_the_table_but_not_the_enumeration():
    check_transition(FAULT_TRANSITIONS, 'closed', 'open', force=True)
    with pytest.raises(InvalidTransition):
        check_transition(FAULT_TRANSITIONS, 'open', 'archived', force=True)


def test_equipment_states_are_fully_connected():
    for current, targets in EQUIPMENT_TRANSITIONS.items():
        assert current not in targets
        assert len(targets) == 2


def test_resolving_stamps_resolved_at_once():
    report = FaultReport(status='in_progress')
    apply_fault_status(report, 'resolved')
    stamped = report.resolved_at
    assert stamped is not None
    apply_fault_status(report, 'resolved')
    assert report.resolved_at == stamped


def test_completed_maintenance_is_terminal():
    record = MaintenanceRecord(status='in_progress')
    apply_maintenance_status(record, 'completed')
    assert record.completion_date is not None
    assert MAINTENANCE_TRANSITIONS['completed'] == set()
    with pytest.raises(InvalidTransition):
        apply_maintenance_status(record, 'pending')
