"""
Role registry.

Maps each role to the model holding its profiles and to the shape of
the role specific identifier (``DOC-0001``, ``T001`` ...).  The table
is built once at import time and never mutated.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Type

from django.db import models

from workforce.models import (
    Administrator,
    Doctor,
    InventoryManager,
    LabStaff,
    LabSupervisor,
    Patient,
    Pharmacist,
    Role,
    Technician,
)


@dataclass(frozen=True)
class RoleDescriptor:
    role: str
    model: Type[models.Model]
    id_field: str
    prefix: str
    width: int = 4
    separator: str = '-'

    @property
    def collection(self) -> str:
        return self.model._meta.db_table

    @property
    def pattern(self) -> re.Pattern:
        return re.compile(rf'^{re.escape(self.prefix + self.separator)}(\d{{{self.width}}})$')

    def format(self, number: int) -> str:
        return f"{self.prefix}{self.separator}{number:0{self.width}d}"

    def parse(self, identifier: Optional[str]) -> Optional[int]:
        match = self.pattern.match(identifier or '')
        return int(match.group(1)) if match else None


ROLE_REGISTRY: Mapping[str, RoleDescriptor] = MappingProxyType({
    Role.PATIENT.value: RoleDescriptor(Role.PATIENT.value, Patient, 'patient_id', 'PAT'),
    Role.DOCTOR.value: RoleDescriptor(Role.DOCTOR.value, Doctor, 'doctor_id', 'DOC'),
    Role.PHARMACIST.value: RoleDescriptor(Role.PHARMACIST.value, Pharmacist, 'pharmacist_id', 'PHA'),
    Role.ADMIN.value: RoleDescriptor(Role.ADMIN.value, Administrator, 'admin_id', 'ADM'),
    Role.INVENTORY_MANAGER.value: RoleDescriptor(Role.INVENTORY_MANAGER.value, InventoryManager, 'inventory_manager_id', 'INV'),
    Role.LAB_SUPERVISOR.value: RoleDescriptor(Role.LAB_SUPERVISOR.value, LabSupervisor, 'supervisor_id', 'LSUP'),
    Role.LAB_STAFF.value: RoleDescriptor(Role.LAB_STAFF.value, LabStaff, 'lab_staff_id', 'LAB'),
    Role.TECHNICIAN.value: RoleDescriptor(Role.TECHNICIAN.value, Technician, 'technician_id', 'T', width=3, separator=''),
})


def lookup(role: Optional[str]) -> Optional[RoleDescriptor]:
    if not role:
        return None
    return ROLE_REGISTRY.get(str(role))


def supported_roles() -> list[str]:
    return list(ROLE_REGISTRY)


def has_role_support(role: Optional[str]) -> bool:
    return lookup(role) is not None
