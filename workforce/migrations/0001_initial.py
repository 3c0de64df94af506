import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import workforce.models


def _profile_fields():
    return [
        ('name', models.CharField(blank=True, default='', max_length=100)),
        ('email', models.EmailField(blank=True, default='', max_length=254)),
        ('department', models.CharField(blank=True, default='', max_length=100)),
        ('notes', models.TextField(blank=True, default='', max_length=500)),
        ('join_date', models.DateTimeField(default=django.utils.timezone.now)),
        ('is_active', models.BooleanField(db_index=True, default=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


def _profile_user(related_name='%(class)s_profile', null=False):
    return (
        'user',
        models.OneToOneField(
            blank=null,
            null=null,
            on_delete=django.db.models.deletion.CASCADE,
            related_name=related_name,
            to='workforce.user',
        ),
    )


def _id_field(pattern, message, max_length=9):
    return models.CharField(
        max_length=max_length,
        unique=True,
        validators=[django.core.validators.RegexValidator(pattern, message)],
    )


SHIFT_CHOICES = [('morning', 'Morning'), ('afternoon', 'Afternoon'), ('evening', 'Evening'), ('night', 'Night')]
AVAILABILITY_STATUS_CHOICES = [
    ('available', 'Available'), ('busy', 'Busy'), ('on leave', 'On leave'), ('off duty', 'Off duty'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('user_id', models.CharField(max_length=16, unique=True, validators=[django.core.validators.RegexValidator('^USR-\\d{4}$', 'User ID should look like USR-1234')])),
                ('name', models.CharField(max_length=100)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('phone', models.CharField(blank=True, default='', max_length=20)),
                ('address', models.CharField(blank=True, default='', max_length=500)),
                ('age', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MaxValueValidator(150)])),
                ('gender', models.CharField(blank=True, choices=[('Male', 'Male'), ('Female', 'Female'), ('Other', 'Other'), ('Prefer not to say', 'Prefer not to say')], default='', max_length=20)),
                ('dob', models.DateField(blank=True, null=True)),
                ('role', models.CharField(choices=[('Patient', 'Patient'), ('Doctor', 'Doctor'), ('Pharmacist', 'Pharmacist'), ('Admin', 'Administrator'), ('LabStaff', 'Lab Staff'), ('InventoryManager', 'Inventory Manager'), ('LabSupervisor', 'Lab Supervisor'), ('Technician', 'Technician')], db_index=True, max_length=20)),
                ('lock_until', models.DateTimeField(blank=True, null=True)),
                ('login_attempts', models.PositiveIntegerField(default=0)),
                ('is_first_login', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'indexes': [models.Index(fields=['is_active', 'role'], name='users_active_role_idx')],
            },
            managers=[
                ('objects', workforce.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Counter',
            fields=[
                ('name', models.CharField(max_length=64, primary_key=True, serialize=False)),
                ('seq', models.BigIntegerField(default=0)),
            ],
            options={
                'db_table': 'counters',
            },
        ),
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_profile_fields(),
                ('phone', models.CharField(blank=True, default='', max_length=20)),
                ('patient_id', _id_field('^PAT-\\d{4}$', 'Patient ID must match PAT-#### format')),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('gender', models.CharField(blank=True, choices=[('male', 'Male'), ('female', 'Female'), ('other', 'Other')], default='', max_length=10)),
                ('street', models.CharField(blank=True, default='', max_length=255)),
                ('city', models.CharField(blank=True, default='', max_length=100)),
                ('state', models.CharField(blank=True, default='', max_length=100)),
                ('zip_code', models.CharField(blank=True, default='', max_length=20)),
                ('emergency_contact_name', models.CharField(blank=True, default='', max_length=100)),
                ('emergency_contact_relationship', models.CharField(blank=True, default='', max_length=50)),
                ('emergency_contact_phone', models.CharField(blank=True, default='', max_length=20, validators=[django.core.validators.RegexValidator('^[\\+]?[1-9][\\d]{0,15}$', 'Invalid emergency contact phone number')])),
                ('registration_date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                _profile_user(),
            ],
            options={
                'db_table': 'patients',
            },
        ),
        migrations.CreateModel(
            name='Doctor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_profile_fields(),
                ('phone', models.CharField(blank=True, default='', max_length=20)),
                ('doctor_id', _id_field('^DOC-\\d{4}$', 'Doctor ID must match DOC-#### format')),
                ('specialty', models.CharField(blank=True, db_index=True, default='', max_length=100)),
                ('experience', models.PositiveSmallIntegerField(default=0)),
                ('is_accepting_new_patients', models.BooleanField(default=True)),
                ('office_phone', models.CharField(blank=True, default='', max_length=20)),
                ('office_location', models.CharField(blank=True, default='', max_length=255)),
                _profile_user(),
            ],
            options={
                'db_table': 'doctors',
            },
        ),
        migrations.CreateModel(
            name='Pharmacist',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_profile_fields(),
                ('phone', models.CharField(blank=True, default='', max_length=20)),
                ('pharmacist_id', _id_field('^PHA-\\d{4}$', 'Pharmacist ID must match PHA-#### format')),
                ('license_number', models.CharField(blank=True, default='', max_length=64)),
                ('experience', models.PositiveSmallIntegerField(default=0)),
                ('shift', models.CharField(choices=SHIFT_CHOICES, db_index=True, default='morning', max_length=10)),
                ('availability_status', models.CharField(choices=AVAILABILITY_STATUS_CHOICES, default='available', max_length=10)),
                ('extension', models.CharField(blank=True, default='', max_length=20)),
                _profile_user(),
            ],
            options={
                'db_table': 'pharmacists',
            },
        ),
        migrations.CreateModel(
            name='Administrator',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_profile_fields(),
                ('phone', models.CharField(blank=True, default='', max_length=20)),
                ('admin_id', _id_field('^ADM-\\d{4}$', 'Administrator ID must match ADM-#### format')),
                ('position', models.CharField(blank=True, default='', max_length=100)),
                ('access_level', models.CharField(choices=[('full', 'Full'), ('limited', 'Limited'), ('read-only', 'Read only')], db_index=True, default='limited', max_length=10)),
                ('experience', models.PositiveSmallIntegerField(default=0)),
                ('availability_status', models.CharField(choices=AVAILABILITY_STATUS_CHOICES, default='available', max_length=10)),
                ('office_phone', models.CharField(blank=True, default='', max_length=20)),
                ('office_location', models.CharField(blank=True, default='', max_length=255)),
                _profile_user(),
            ],
            options={
                'db_table': 'administrators',
            },
        ),
        migrations.CreateModel(
            name='InventoryManager',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_profile_fields(),
                ('phone', models.CharField(blank=True, default='', max_length=20)),
                ('inventory_manager_id', _id_field('^INV-\\d{4}$', 'Inventory Manager ID must match INV-#### format')),
                ('managed_areas', models.JSONField(blank=True, default=list)),
                ('experience', models.PositiveSmallIntegerField(default=0)),
                ('shift', models.CharField(choices=SHIFT_CHOICES, default='morning', max_length=10)),
                ('availability_status', models.CharField(choices=AVAILABILITY_STATUS_CHOICES, default='available', max_length=10)),
                ('office_phone', models.CharField(blank=True, default='', max_length=20)),
                ('office_location', models.CharField(blank=True, default='', max_length=255)),
                _profile_user(),
            ],
            options={
                'db_table': 'inventory_managers',
            },
        ),
        migrations.CreateModel(
            name='LabSupervisor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_profile_fields(),
                ('phone', models.CharField(blank=True, default='', max_length=20)),
                ('supervisor_id', _id_field('^LSUP-\\d{4}$', 'Lab Supervisor ID must match LSUP-#### format', max_length=10)),
                ('managed_sections', models.JSONField(blank=True, default=list)),
                ('office_phone', models.CharField(blank=True, default='', max_length=20)),
                ('office_location', models.CharField(blank=True, default='', max_length=255)),
                _profile_user(),
            ],
            options={
                'db_table': 'lab_supervisors',
            },
        ),
        migrations.CreateModel(
            name='LabStaff',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_profile_fields(),
                ('phone', models.CharField(blank=True, default='', max_length=20)),
                ('lab_staff_id', _id_field('^LAB-\\d{4}$', 'Lab Staff ID must match LAB-#### format')),
                ('position', models.CharField(blank=True, db_index=True, default='', max_length=100)),
                ('shift', models.CharField(choices=SHIFT_CHOICES, db_index=True, default='morning', max_length=10)),
                ('extension', models.CharField(blank=True, default='', max_length=20)),
                ('availability', models.CharField(choices=[('Available', 'Available'), ('Not Available', 'Not Available')], default='Available', max_length=15)),
                _profile_user(),
            ],
            options={
                'db_table': 'lab_staff',
                'verbose_name_plural': 'lab staff',
            },
        ),
        migrations.CreateModel(
            name='Technician',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_profile_fields(),
                ('phone', models.CharField(blank=True, default='', max_length=20, validators=[django.core.validators.RegexValidator('^[\\+]?[1-9][\\d]{0,15}$', 'Invalid phone number')])),
                ('technician_id', _id_field('^T\\d{3}$', 'Technician ID must match T### format', max_length=4)),
                ('first_name', models.CharField(max_length=50)),
                ('last_name', models.CharField(blank=True, default='', max_length=50)),
                ('specialization', models.CharField(blank=True, default='', max_length=100)),
                ('skills', models.JSONField(blank=True, default=list)),
                ('location', models.CharField(blank=True, default='Main Building', max_length=255)),
                ('shift', models.CharField(choices=[('morning', 'Morning'), ('afternoon', 'Afternoon'), ('night', 'Night'), ('day', 'Day')], default='day', max_length=10)),
                ('availability_status', models.CharField(choices=AVAILABILITY_STATUS_CHOICES, default='available', max_length=10)),
                ('experience_level', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(50)])),
                ('hire_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('availability', models.BooleanField(db_index=True, default=True)),
                _profile_user('technician_profile', null=True),
            ],
            options={
                'db_table': 'technicians',
            },
        ),
        migrations.CreateModel(
            name='AuditEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('object_type', models.CharField(blank=True, max_length=64, null=True)),
                ('object_id', models.CharField(blank=True, max_length=64, null=True)),
                ('detail', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to='workforce.user')),
            ],
            options={
                'indexes': [
                    models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
                    models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
                ],
            },
        ),
    ]
