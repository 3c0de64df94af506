"""
Database models for the clinic workforce backend.

A :class:`User` is the identity record shared by everyone who works
with the clinic system, from patients to lab supervisors.  Each role
that appears in the role registry (see ``workforce.services.roles``)
also owns exactly one role profile holding the attributes specific to
that role.  Users and profiles are created, updated and deleted
together by ``workforce.services.users``; nothing else should write
profiles directly.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.validators import MaxValueValidator, RegexValidator
from django.db import models, transaction
from django.utils import timezone


class Role(models.TextChoices):
    """Roles a user can hold.  The stored value is what the API exposes."""
    PATIENT = 'Patient', 'Patient'
    DOCTOR = 'Doctor', 'Doctor'
    PHARMACIST = 'Pharmacist', 'Pharmacist'
    ADMIN = 'Admin', 'Administrator'
    LAB_STAFF = 'LabStaff', 'Lab Staff'
    INVENTORY_MANAGER = 'InventoryManager', 'Inventory Manager'
    LAB_SUPERVISOR = 'LabSupervisor', 'Lab Supervisor'
    TECHNICIAN = 'Technician', 'Technician'


USER_ID_PATTERN = r'^USR-\d{4}$'
PHONE_PATTERN = r'^[\+]?[1-9][\d]{0,15}$'

SHIFT_CHOICES = [
    ('morning', 'Morning'),
    ('afternoon', 'Afternoon'),
    ('evening', 'Evening'),
    ('night', 'Night'),
]
AVAILABILITY_STATUS_CHOICES = [
    ('available', 'Available'),
    ('busy', 'Busy'),
    ('on leave', 'On leave'),
    ('off duty', 'Off duty'),
]


class UserManager(BaseUserManager):
    """Manager for the email-keyed :class:`User`.

    ``create_user`` writes a bare user without a role profile; use
    ``workforce.services.users.create_user_with_role`` for anything that
    should show up in a role collection.  ``create_superuser`` also
    provisions the profile of its role (Administrator by default).
    """
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('email is required')
        if not extra_fields.get('user_id'):
            from workforce.services.sequences import next_user_id
            extra_fields['user_id'] = next_user_id()
        user = self.model(email=self.normalize_email(email).strip().lower(), **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        extra_fields.setdefault('role', Role.PATIENT)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', Role.ADMIN)
        from workforce.services.users import attach_role_profile
        with transaction.atomic(using=self._db):
            user = self._create_user(email, password, **extra_fields)
            attach_role_profile(user)
        return user


class User(AbstractUser):
    """Identity record for every person using the system.

    Email is the login field and is stored lowercased.  ``user_id`` is
    the human facing identifier (``USR-0001``) minted from the
    ``user_id`` counter when the user is created.
    """
    GENDER_CHOICES = [
        ('Male', 'Male'),
        ('Female', 'Female'),
        ('Other', 'Other'),
        ('Prefer not to say', 'Prefer not to say'),
    ]

    username = None
    user_id = models.CharField(
        max_length=16,
        unique=True,
        validators=[RegexValidator(USER_ID_PATTERN, 'User ID should look like USR-1234')],
    )
    name = models.CharField(max_length=100)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, blank=True, default='')
    address = models.CharField(max_length=500, blank=True, default='')
    age = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MaxValueValidator(150)])
    gender = models.CharField(max_length=20, choices=GENDER_CHOICES, blank=True, default='')
    dob = models.DateField(null=True, blank=True)
    role = models.CharField(max_length=20, choices=Role.choices, db_index=True)
    # Account lockout after repeated failed logins, or an admin lock
    lock_until = models.DateTimeField(null=True, blank=True)
    login_attempts = models.PositiveIntegerField(default=0)
    is_first_login = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        indexes = [
            models.Index(fields=['is_active', 'role'], name='users_active_role_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} {self.name} ({self.role})"

    def clean(self):
        super().clean()
        self.name = (self.name or '').strip()
        self.email = (self.email or '').strip().lower()

    def get_full_name(self) -> str:
        return self.name

    def get_short_name(self) -> str:
        return self.name.split(' ')[0] if self.name else ''

    @property
    def is_locked(self) -> bool:
        return bool(self.lock_until and self.lock_until > timezone.now())


class Counter(models.Model):
    """A named, durable sequence.  ``seq`` is the last value handed out."""
    name = models.CharField(max_length=64, primary_key=True)
    seq = models.BigIntegerField(default=0)

    class Meta:
        db_table = 'counters'

    def __str__(self) -> str:
        return f"{self.name}={self.seq}"


class RoleProfile(models.Model):
    """Fields shared by every role profile.

    ``name``, ``email`` and ``phone`` mirror the owning user and are kept
    in sync by the cascade update.  The one-to-one link enforces at most
    one profile per user in each role table.
    """
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='%(class)s_profile')
    name = models.CharField(max_length=100, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=20, blank=True, default='')
    department = models.CharField(max_length=100, blank=True, default='')
    notes = models.TextField(max_length=500, blank=True, default='')
    join_date = models.DateTimeField(default=timezone.now)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Patient(RoleProfile):
    GENDER_CHOICES = [('male', 'Male'), ('female', 'Female'), ('other', 'Other')]

    patient_id = models.CharField(
        max_length=9, unique=True,
        validators=[RegexValidator(r'^PAT-\d{4}$', 'Patient ID must match PAT-#### format')],
    )
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, default='')
    street = models.CharField(max_length=255, blank=True, default='')
    city = models.CharField(max_length=100, blank=True, default='')
    state = models.CharField(max_length=100, blank=True, default='')
    zip_code = models.CharField(max_length=20, blank=True, default='')
    emergency_contact_name = models.CharField(max_length=100, blank=True, default='')
    emergency_contact_relationship = models.CharField(max_length=50, blank=True, default='')
    emergency_contact_phone = models.CharField(
        max_length=20, blank=True, default='',
        validators=[RegexValidator(PHONE_PATTERN, 'Invalid emergency contact phone number')],
    )
    registration_date = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'patients'

    def __str__(self) -> str:
        return f"{self.patient_id} ({self.name})"


class Doctor(RoleProfile):
    doctor_id = models.CharField(
        max_length=9, unique=True,
        validators=[RegexValidator(r'^DOC-\d{4}$', 'Doctor ID must match DOC-#### format')],
    )
    specialty = models.CharField(max_length=100, blank=True, default='', db_index=True)
    experience = models.PositiveSmallIntegerField(default=0)
    is_accepting_new_patients = models.BooleanField(default=True)
    office_phone = models.CharField(max_length=20, blank=True, default='')
    office_location = models.CharField(max_length=255, blank=True, default='')

    class Meta:
        db_table = 'doctors'

    def __str__(self) -> str:
        return f"{self.doctor_id} ({self.specialty})"


class Pharmacist(RoleProfile):
    pharmacist_id = models.CharField(
        max_length=9, unique=True,
        validators=[RegexValidator(r'^PHA-\d{4}$', 'Pharmacist ID must match PHA-#### format')],
    )
    license_number = models.CharField(max_length=64, blank=True, default='')
    experience = models.PositiveSmallIntegerField(default=0)
    shift = models.CharField(max_length=10, choices=SHIFT_CHOICES, default='morning', db_index=True)
    availability_status = models.CharField(max_length=10, choices=AVAILABILITY_STATUS_CHOICES, default='available')
    extension = models.CharField(max_length=20, blank=True, default='')

    class Meta:
        db_table = 'pharmacists'

    def __str__(self) -> str:
        return self.pharmacist_id


class Administrator(RoleProfile):
    ACCESS_LEVEL_CHOICES = [
        ('full', 'Full'),
        ('limited', 'Limited'),
        ('read-only', 'Read only'),
    ]

    admin_id = models.CharField(
        max_length=9, unique=True,
        validators=[RegexValidator(r'^ADM-\d{4}$', 'Administrator ID must match ADM-#### format')],
    )
    position = models.CharField(max_length=100, blank=True, default='')
    access_level = models.CharField(max_length=10, choices=ACCESS_LEVEL_CHOICES, default='limited', db_index=True)
    experience = models.PositiveSmallIntegerField(default=0)
    availability_status = models.CharField(max_length=10, choices=AVAILABILITY_STATUS_CHOICES, default='available')
    office_phone = models.CharField(max_length=20, blank=True, default='')
    office_location = models.CharField(max_length=255, blank=True, default='')

    class Meta:
        db_table = 'administrators'

    def __str__(self) -> str:
        return f"{self.admin_id} ({self.position})"


class InventoryManager(RoleProfile):
    inventory_manager_id = models.CharField(
        max_length=9, unique=True,
        validators=[RegexValidator(r'^INV-\d{4}$', 'Inventory Manager ID must match INV-#### format')],
    )
    managed_areas = models.JSONField(default=list, blank=True)
    experience = models.PositiveSmallIntegerField(default=0)
    shift = models.CharField(max_length=10, choices=SHIFT_CHOICES, default='morning')
    availability_status = models.CharField(max_length=10, choices=AVAILABILITY_STATUS_CHOICES, default='available')
    office_phone = models.CharField(max_length=20, blank=True, default='')
    office_location = models.CharField(max_length=255, blank=True, default='')

    class Meta:
        db_table = 'inventory_managers'

    def __str__(self) -> str:
        return self.inventory_manager_id


class LabSupervisor(RoleProfile):
    supervisor_id = models.CharField(
        max_length=10, unique=True,
        validators=[RegexValidator(r'^LSUP-\d{4}$', 'Lab Supervisor ID must match LSUP-#### format')],
    )
    managed_sections = models.JSONField(default=list, blank=True)
    office_phone = models.CharField(max_length=20, blank=True, default='')
    office_location = models.CharField(max_length=255, blank=True, default='')

    class Meta:
        db_table = 'lab_supervisors'

    def __str__(self) -> str:
        return self.supervisor_id


class LabStaff(RoleProfile):
    AVAILABILITY_CHOICES = [('Available', 'Available'), ('Not Available', 'Not Available')]

    lab_staff_id = models.CharField(
        max_length=9, unique=True,
        validators=[RegexValidator(r'^LAB-\d{4}$', 'Lab Staff ID must match LAB-#### format')],
    )
    position = models.CharField(max_length=100, blank=True, default='', db_index=True)
    shift = models.CharField(max_length=10, choices=SHIFT_CHOICES, default='morning', db_index=True)
    extension = models.CharField(max_length=20, blank=True, default='')
    availability = models.CharField(max_length=15, choices=AVAILABILITY_CHOICES, default='Available')

    class Meta:
        db_table = 'lab_staff'
        verbose_name_plural = 'lab staff'

    def __str__(self) -> str:
        return self.lab_staff_id


class Technician(RoleProfile):
    """Maintenance technician.

    Technicians may be registered without a login account, so the user
    link is optional here.
    """
    SHIFT_CHOICES = [
        ('morning', 'Morning'),
        ('afternoon', 'Afternoon'),
        ('night', 'Night'),
        ('day', 'Day'),
    ]

    user = models.OneToOneField(
        User, null=True, blank=True, on_delete=models.CASCADE, related_name='technician_profile'
    )
    phone = models.CharField(
        max_length=20, blank=True, default='',
        validators=[RegexValidator(PHONE_PATTERN, 'Invalid phone number')],
    )
    technician_id = models.CharField(
        max_length=4, unique=True,
        validators=[RegexValidator(r'^T\d{3}$', 'Technician ID must match T### format')],
    )
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50, blank=True, default='')
    specialization = models.CharField(max_length=100, blank=True, default='')
    skills = models.JSONField(default=list, blank=True)
    location = models.CharField(max_length=255, blank=True, default='Main Building')
    shift = models.CharField(max_length=10, choices=SHIFT_CHOICES, default='day')
    availability_status = models.CharField(max_length=10, choices=AVAILABILITY_STATUS_CHOICES, default='available')
    experience_level = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(50)])
    hire_date = models.DateTimeField(default=timezone.now)
    availability = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = 'technicians'

    def __str__(self) -> str:
        return f"{self.technician_id} ({self.full_name})"

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.name or self.first_name or 'Unknown Technician'


class AuditEvent(models.Model):
    """Who did what to which user, written inside the cascade transaction."""
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.object_id}@{self.created_at:%F %T}"
