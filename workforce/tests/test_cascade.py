import re
import threading
import time

import pytest
from django.db import IntegrityError, OperationalError, connection, transaction

from workforce.exceptions import CascadeError, DuplicateUserError, ProfileValidationError, UserNotFoundError
from workforce.models import Administrator, AuditEvent, Doctor, Patient, Pharmacist, Role, Technician, User
from workforce.services import users as cascade
from workforce.services.sequences import current_value
from workforce.services.users import (
    attach_role_profile,
    create_user_with_role,
    delete_user_with_role,
    get_user_with_role_data,
    update_user_with_role,
)

from .conftest import PASSWORD

pytestmark = pytest.mark.django_db


def _doctor(email='house@clinic.test', name='Greg House', **extra):
    return create_user_with_role({'name': name, 'email': email, 'role': 'Doctor', 'password': PASSWORD, **extra})


def test_create_mints_user_and_role_ids():
    first = _doctor()
    assert first.success
    assert first.user.user_id == 'USR-0001'
    assert first.role_data.doctor_id == 'DOC-0001'
    assert first.role_data.user_id == first.user.pk
    assert first.message == 'User and doctor profile created successfully'

    second = _doctor(email='wilson@clinic.test', name='James Wilson')
    assert second.user.user_id == 'USR-0002'
    assert second.role_data.doctor_id == 'DOC-0002'
    assert Doctor.objects.count() == 2


def test_profile_mirrors_identity_fields():
    result = _doctor(email='  House@Clinic.TEST ', name=' Greg House ', phone='5550100')
    profile = result.role_data
    assert result.user.email == 'house@clinic.test'
    assert (profile.name, profile.email, profile.phone) == ('Greg House', 'house@clinic.test', '5550100')
    assert profile.specialty == 'General Medicine'


def test_patient_defaults_and_optional_password():
    result = create_user_with_role({'name': 'Pat Doe', 'email': 'pat@clinic.test'})
    assert result.user.role == Role.PATIENT
    assert not result.user.has_usable_password()
    assert result.role_data.patient_id == 'PAT-0001'
    assert result.message == 'User and patient profile created successfully'


def test_technician_profile():
    result = create_user_with_role({'name': 'Tom', 'email': 'tom@clinic.test', 'role': 'Technician', 'password': PASSWORD})
    assert result.role_data.technician_id == 'T001'
    assert result.role_data.first_name == 'Tom'
    assert result.role_data.last_name == ''
    assert re.match(r'^T\d{3}$', result.role_data.technician_id)


def test_user_id_in_payload_is_ignored():
    result = _doctor(user_id='USR-7777')
    assert result.user.user_id == 'USR-0001'


def test_skips_ids_already_taken():
    User.objects.create_user(email='old@clinic.test', name='Old Timer', user_id='USR-0001')
    result = _doctor()
    assert result.user.user_id == 'USR-0002'
    assert current_value('user_id') == 2


def test_many_creations_get_distinct_ids():
    ids = [_doctor(email=f'doc{i}@clinic.test', name=f'Doc {i}').user.user_id for i in range(6)]
    assert len(set(ids)) == 6
    assert all(re.match(r'^USR-\d{4}$', i) for i in ids)
    assert sorted(Doctor.objects.values_list('doctor_id', flat=True)) == [f'DOC-{n:04d}' for n in range(1, 7)]


def test_role_without_profile_table(monkeypatch):
    monkeypatch.setattr(cascade, 'lookup', lambda role: None)
    result = _doctor()
    assert result.role_data is None
    assert result.message == 'User created successfully'
    assert Doctor.objects.count() == 0


def test_non_patient_requires_password():
    with pytest.raises(ProfileValidationError) as exc:
        create_user_with_role({'name': 'No Pass', 'email': 'np@clinic.test', 'role': 'Doctor'})
    assert 'password' in exc.value.detail
    assert str(exc.value).startswith('Failed to create user with role:')
    assert User.objects.count() == 0
    # the counter bump rolled back with the user
    assert current_value('user_id') == 0


def test_weak_password_is_rejected():
    with pytest.raises(ProfileValidationError):
        _doctor(password='abc')
    assert User.objects.count() == 0


def test_unknown_fields_are_rejected():
    with pytest.raises(ProfileValidationError):
        _doctor(is_superuser=True)
    assert User.objects.count() == 0


def test_duplicate_email():
    _doctor()
    with pytest.raises(DuplicateUserError) as exc:
        _doctor(name='Someone Else')
    assert exc.value.status_code == 409
    assert User.objects.count() == 1
    assert Doctor.objects.count() == 1


def test_create_rolls_back_when_profile_fails(monkeypatch):
    def boom(user, generated_id):
        raise RuntimeError('profile store unavailable')

    monkeypatch.setattr(cascade, 'build_defaults', boom)
    with pytest.raises(CascadeError) as exc:
        _doctor()
    assert type(exc.value) is CascadeError
    assert str(exc.value) == 'Failed to create user with role: profile store unavailable'
    assert User.objects.count() == 0
    assert Doctor.objects.count() == 0
    assert current_value('user_id') == 0


def test_create_is_audited(admin_user):
    result = create_user_with_role(
        {'name': 'Greg House', 'email': 'house@clinic.test', 'role': 'Doctor', 'password': PASSWORD},
        actor=admin_user,
    )
    event = AuditEvent.objects.get(action='user_create')
    assert event.user == admin_user
    assert event.object_id == result.user.user_id
    assert event.detail == {'role': 'Doctor', 'profile': 'DOC-0001'}


def test_update_propagates_shared_fields():
    user = _doctor().user
    result = update_user_with_role(user.pk, {'name': 'Gregory House', 'email': 'gh@clinic.test', 'phone': '5550199', 'age': 52})
    assert result.message == 'User and role data updated successfully'
    profile = Doctor.objects.get(user=user)
    assert (profile.name, profile.email, profile.phone) == ('Gregory House', 'gh@clinic.test', '5550199')
    user.refresh_from_db()
    assert user.age == 52


def test_update_does_not_touch_profile_only_fields():
    user = _doctor().user
    Doctor.objects.filter(user=user).update(specialty='Nephrology')
    update_user_with_role(user.pk, {'address': '221B Baker Street'})
    assert Doctor.objects.get(user=user).specialty == 'Nephrology'


def test_update_changes_password():
    user = _doctor().user
    update_user_with_role(user.pk, {'password': 'An0ther!Secret'})
    user.refresh_from_db()
    assert user.check_password('An0ther!Secret')


def test_update_rolls_back_when_profile_is_invalid():
    user = create_user_with_role({'name': 'Tom Fix', 'email': 'tom@clinic.test', 'role': 'Technician', 'password': PASSWORD}).user
    with pytest.raises(ProfileValidationError) as exc:
        update_user_with_role(user.pk, {'phone': 'not-a-phone', 'name': 'Thomas Fix'})
    assert 'phone' in exc.value.detail
    user.refresh_from_db()
    assert user.phone == ''
    assert user.name == 'Tom Fix'
    assert Technician.objects.get(user=user).name == 'Tom Fix'


def test_update_duplicate_email():
    _doctor()
    other = _doctor(email='wilson@clinic.test', name='James Wilson').user
    with pytest.raises(DuplicateUserError):
        update_user_with_role(other.pk, {'email': 'house@clinic.test'})


def test_role_change_swaps_profile():
    user = _doctor().user
    result = update_user_with_role(user.pk, {'role': 'Pharmacist'})
    assert not Doctor.objects.filter(user=user).exists()
    assert result.role_data.pharmacist_id == 'PHA-0001'
    assert Pharmacist.objects.get(user=user).email == 'house@clinic.test'


def test_update_missing_user():
    with pytest.raises(UserNotFoundError) as exc:
        update_user_with_role(999999, {'name': 'Ghost'})
    assert exc.value.status_code == 404
    assert str(exc.value) == 'Failed to update user with role: User not found'


def test_delete_removes_user_and_profile():
    user = _doctor().user
    result = delete_user_with_role(user.pk)
    assert result.message == 'User and role data deleted successfully'
    assert not User.objects.filter(pk=user.pk).exists()
    assert not Doctor.objects.filter(user_id=user.pk).exists()
    with pytest.raises(UserNotFoundError):
        get_user_with_role_data(user.pk)
    assert AuditEvent.objects.filter(action='user_delete', object_id='USR-0001').exists()


def test_delete_rolls_back_when_user_delete_fails(monkeypatch):
    user = _doctor().user

    def boom(self, *args, **kwargs):
        raise RuntimeError('disk full')

    monkeypatch.setattr(User, 'delete', boom)
    with pytest.raises(CascadeError) as exc:
        delete_user_with_role(user.pk)
    assert str(exc.value) == 'Failed to delete user with role: disk full'
    assert Doctor.objects.filter(user=user).exists()
    assert User.objects.filter(pk=user.pk).exists()


def test_delete_missing_user():
    with pytest.raises(UserNotFoundError):
        delete_user_with_role(424242)


def test_get_user_with_role_data():
    created = create_user_with_role({'name': 'Pat Doe', 'email': 'pat@clinic.test'})
    result = get_user_with_role_data(created.user.pk)
    assert result.user == created.user
    assert isinstance(result.role_data, Patient)
    assert result.as_dict()['roleData'] == result.role_data


def test_get_with_malformed_pk():
    with pytest.raises(UserNotFoundError):
        get_user_with_role_data('abc')


def test_second_profile_for_same_user_is_rejected():
    user = _doctor().user
    with pytest.raises(IntegrityError), transaction.atomic():
        Doctor.objects.create(user=user, doctor_id='DOC-0002', name=user.name)
    assert Doctor.objects.filter(user=user).count() == 1


def test_attach_role_profile_is_idempotent():
    user = _doctor().user
    with transaction.atomic():
        profile = attach_role_profile(user)
    assert profile.doctor_id == 'DOC-0001'
    assert Doctor.objects.filter(user=user).count() == 1


def test_create_superuser_gets_administrator_profile():
    user = User.objects.create_superuser(email='boss@clinic.test', password=PASSWORD, name='Big Boss')
    assert user.user_id == 'USR-0001'
    assert user.role == Role.ADMIN
    assert Administrator.objects.get(user=user).admin_id == 'ADM-0001'


@pytest.mark.django_db(transaction=True)
def test_concurrent_creations_get_distinct_user_ids():
    roles = list(Role)
    barrier = threading.Barrier(len(roles))
    results, failures = [], []

    def worker(n, role):
        try:
            barrier.wait()
            # sqlite serialises writers; a locked table is retried
            for _ in range(50):
                try:
                    result = create_user_with_role({
                        'name': f'Worker {n}', 'email': f'worker{n}@clinic.test',
                        'role': role.value, 'password': PASSWORD,
                    })
                except CascadeError as exc:
                    if not isinstance(exc.cause, OperationalError):
                        raise
                    time.sleep(0.02)
                else:
                    results.append(result.user.user_id)
                    return
            failures.append(f'worker {n} gave up')
        except Exception as exc:
            failures.append(repr(exc))
        finally:
            connection.close()

    threads = [threading.Thread(target=worker, args=(n, role)) for n, role in enumerate(roles)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert failures == []
    assert len(results) == len(roles)
    assert len(set(results)) == len(roles)
    assert all(re.match(r'^USR-\d{4}$', i) for i in results)
    assert current_value('user_id') == len(roles)
