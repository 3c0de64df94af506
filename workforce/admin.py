"""
Django admin registrations for the workforce models.

Profiles are listed read-mostly: their identifiers come from the
identifier generator and should not be edited by hand.
"""

from django.contrib import admin

from .models import (
    Administrator,
    AuditEvent,
    Counter,
    Doctor,
    InventoryManager,
    LabStaff,
    LabSupervisor,
    Patient,
    Pharmacist,
    Technician,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('user_id', 'name', 'email', 'role', 'is_active', 'lock_until', 'last_login')
    list_filter = ('role', 'is_active')
    search_fields = ('user_id', 'name', 'email')
    readonly_fields = ('user_id', 'created_at', 'updated_at')
    ordering = ('user_id',)


@admin.register(Counter)
class CounterAdmin(admin.ModelAdmin):
    list_display = ('name', 'seq')


class RoleProfileAdmin(admin.ModelAdmin):
    id_field = ''
    list_filter = ('is_active', 'department')
    search_fields = ('name', 'email', 'user__user_id')

    def get_list_display(self, request):
        return (self.id_field, 'name', 'email', 'department', 'is_active', 'join_date')

    def get_readonly_fields(self, request, obj=None):
        return (self.id_field, 'user', 'created_at', 'updated_at')


@admin.register(Patient)
class PatientAdmin(RoleProfileAdmin):
    id_field = 'patient_id'


@admin.register(Doctor)
class DoctorAdmin(RoleProfileAdmin):
    id_field = 'doctor_id'


@admin.register(Pharmacist)
class PharmacistAdmin(RoleProfileAdmin):
    id_field = 'pharmacist_id'


@admin.register(Administrator)
class AdministratorAdmin(RoleProfileAdmin):
    id_field = 'admin_id'


@admin.register(InventoryManager)
class InventoryManagerAdmin(RoleProfileAdmin):
    id_field = 'inventory_manager_id'


@admin.register(LabSupervisor)
class LabSupervisorAdmin(RoleProfileAdmin):
    id_field = 'supervisor_id'


@admin.register(LabStaff)
class LabStaffAdmin(RoleProfileAdmin):
    id_field = 'lab_staff_id'


@admin.register(Technician)
class TechnicianAdmin(RoleProfileAdmin):
    id_field = 'technician_id'
    list_filter = ('availability_status', 'shift', 'department')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'object_type', 'object_id', 'user', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id',)
