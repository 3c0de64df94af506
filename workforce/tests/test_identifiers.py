import pytest
from django.db import connection, transaction
from django.test.utils import CaptureQueriesContext

from workforce.models import Doctor, Role, Technician, User
from workforce.services.identifiers import generate_role_id

pytestmark = pytest.mark.django_db


def _user(n, role):
    return User.objects.create_user(email=f'u{n}@clinic.test', name=f'User {n}', role=role, user_id=f'USR-{n:04d}')


def test_first_identifier_starts_at_one():
    with transaction.atomic():
        assert generate_role_id(Role.PATIENT) == 'PAT-0001'
        assert generate_role_id(Role.TECHNICIAN) == 'T001'


def test_next_after_highest_existing():
    Doctor.objects.create(user=_user(1, Role.DOCTOR), doctor_id='DOC-0003')
    Doctor.objects.create(user=_user(2, Role.DOCTOR), doctor_id='DOC-0007')
    with transaction.atomic():
        assert generate_role_id('Doctor') == 'DOC-0008'


def test_malformed_identifiers_are_ignored():
    Doctor.objects.create(user=_user(1, Role.DOCTOR), doctor_id='DOC-12')
    with transaction.atomic():
        assert generate_role_id(Role.DOCTOR) == 'DOC-0001'


def test_technician_ids_use_three_digits():
    Technician.objects.create(user=_user(1, Role.TECHNICIAN), technician_id='T009', first_name='Tom')
    with transaction.atomic():
        assert generate_role_id(Role.TECHNICIAN) == 'T010'


def test_unknown_role_is_rejected():
    with transaction.atomic():
        with pytest.raises(ValueError):
            generate_role_id('Nurse')


@pytest.mark.django_db(transaction=True)
def test_requires_a_transaction():
    with pytest.raises(RuntimeError):
        generate_role_id(Role.DOCTOR)


def test_scan_uses_a_portable_prefix_filter():
    Doctor.objects.create(user=_user(1, Role.DOCTOR), doctor_id='DOC-0004')
    Doctor.objects.create(user=_user(2, Role.DOCTOR), doctor_id='DOCX-0009')
    with transaction.atomic(), CaptureQueriesContext(connection) as ctx:
        assert generate_role_id(Role.DOCTOR) == 'DOC-0005'
    sql = ' '.join(q['sql'] for q in ctx.captured_queries).upper()
    assert 'REGEXP' not in sql
    assert 'LIKE' in sql
