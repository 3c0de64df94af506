"""Initial field values for a freshly provisioned role profile."""
from __future__ import annotations

from typing import Any, Callable, Dict

from django.utils import timezone

from workforce.models import Role
from workforce.services.roles import lookup


def _patient(user, now) -> Dict[str, Any]:
    return {'registration_date': now}


def _doctor(user, now) -> Dict[str, Any]:
    return {
        'specialty': 'General Medicine',
        'experience': 0,
        'is_accepting_new_patients': True,
        'department': 'General Medicine',
    }


def _pharmacist(user, now) -> Dict[str, Any]:
    return {
        'experience': 0,
        'department': 'Pharmacy',
        'shift': 'morning',
        'availability_status': 'available',
    }


def _administrator(user, now) -> Dict[str, Any]:
    return {
        'position': 'System Administrator',
        'experience': 0,
        'department': 'Information Technology',
        'availability_status': 'available',
    }


def _inventory_manager(user, now) -> Dict[str, Any]:
    return {
        'experience': 0,
        'department': 'Inventory Management',
        'shift': 'morning',
        'availability_status': 'available',
    }


def _lab_supervisor(user, now) -> Dict[str, Any]:
    return {
        'department': 'Laboratory',
        'managed_sections': ['General Lab', 'Testing'],
        'notes': 'Lab supervisor responsible for overseeing laboratory operations',
    }


def _lab_staff(user, now) -> Dict[str, Any]:
    return {
        'position': 'Lab Technician',
        'department': 'Laboratory',
        'shift': 'morning',
        'notes': 'Lab staff member responsible for laboratory operations',
    }


def _technician(user, now) -> Dict[str, Any]:
    parts = (user.name or '').split(' ')
    return {
        'first_name': parts[0],
        'last_name': ' '.join(parts[1:]),
        'department': 'Maintenance',
        'availability_status': 'available',
        'availability': True,
        'hire_date': now,
    }


ROLE_DEFAULTS: Dict[str, Callable[[Any, Any], Dict[str, Any]]] = {
    Role.PATIENT.value: _patient,
    Role.DOCTOR.value: _doctor,
    Role.PHARMACIST.value: _pharmacist,
    Role.ADMIN.value: _administrator,
    Role.INVENTORY_MANAGER.value: _inventory_manager,
    Role.LAB_SUPERVISOR.value: _lab_supervisor,
    Role.LAB_STAFF.value: _lab_staff,
    Role.TECHNICIAN.value: _technician,
}


def build_defaults(user, generated_id: str) -> Dict[str, Any]:
    """Field values for a new profile of ``user.role``.

    Pure: reads ``user`` and the clock, writes nothing.  The result can
    be passed straight to the profile model constructor.
    """
    descriptor = lookup(user.role)
    if descriptor is None:
        raise ValueError(f"No mapping found for role: {user.role}")
    now = timezone.now()
    data: Dict[str, Any] = {
        descriptor.id_field: generated_id,
        'user': user,
        'name': user.name,
        'email': user.email,
        'phone': user.phone or '',
        'is_active': True,
        'join_date': now,
    }
    data.update(ROLE_DEFAULTS[descriptor.role](user, now))
    return data
